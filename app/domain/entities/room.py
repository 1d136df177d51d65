"""Room domain entity."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import OccupancyStatus, RoomGender
from app.domain.exceptions import ValidationException


@dataclass
class RoomEntity:
    """Domain entity for a dormitory room.

    ``occupant_refs`` holds worker national ids. Its length is expected to
    match ``current_occupancy`` but nothing enforces it transactionally.
    """

    id: str
    number: str
    site_id: str
    gender: RoomGender
    capacity: int
    current_occupancy: int = 0
    occupant_refs: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate room business rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Room ID is required", field="id")
        if not self.number or not self.number.strip():
            raise ValidationException("Room number is required", field="number")
        if not self.site_id:
            raise ValidationException("Room site is required", field="siteId")
        if self.capacity < 1:
            raise ValidationException("Room capacity must be at least 1", field="roomCapacity")
        if self.current_occupancy < 0:
            raise ValidationException(
                "Room occupancy must not be negative", field="currentOccupancy"
            )

    def check_capacity(self, new_capacity: int) -> None:
        """Raise ValidationException unless new_capacity is allowed for this room.

        Capacity must be at least 1 and never below the present occupants.
        """
        if new_capacity < 1:
            raise ValidationException("Room capacity must be at least 1", field="roomCapacity")
        if new_capacity < self.current_occupancy:
            raise ValidationException(
                f"New capacity ({new_capacity}) cannot be lower than the current "
                f"number of occupants ({self.current_occupancy})",
                field="roomCapacity",
            )

    @property
    def available_places(self) -> int:
        """Free beds (never negative)."""
        return max(self.capacity - self.current_occupancy, 0)

    @property
    def occupancy_percentage(self) -> float:
        """Occupancy over capacity, in percent."""
        return self.current_occupancy / self.capacity * 100

    @property
    def occupancy_status(self) -> OccupancyStatus:
        """FREE when empty, FULL at or above capacity, PARTIAL otherwise."""
        if self.current_occupancy == 0:
            return OccupancyStatus.FREE
        if self.current_occupancy < self.capacity:
            return OccupancyStatus.PARTIAL
        return OccupancyStatus.FULL

    @property
    def is_occupied(self) -> bool:
        return self.current_occupancy > 0
