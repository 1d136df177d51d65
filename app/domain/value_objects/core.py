"""Domain value objects for the worker housing service.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from dataclasses import dataclass

from app.domain.enums import RoomGender
from app.domain.exceptions import ValidationException


@dataclass(frozen=True)
class RoomSpec:
    """One room to create: number, dormitory and capacity."""

    number: str
    gender: RoomGender
    capacity: int


@dataclass(frozen=True)
class RoomPlan:
    """Plan for the rooms generated together with a new site.

    Men's rooms are numbered ``[men_start, men_start + men_count)`` and
    women's rooms ``[women_start, women_start + women_count)``. When
    ``auto_create_rooms`` is False no room is generated and the plan's
    totals are zero.
    """

    auto_create_rooms: bool = True
    men_count: int = 10
    men_capacity: int = 4
    men_start: int = 101
    women_count: int = 10
    women_capacity: int = 4
    women_start: int = 201

    def __post_init__(self) -> None:
        if not self.auto_create_rooms:
            return
        for field, value in (("men_count", self.men_count), ("women_count", self.women_count)):
            if value < 0:
                raise ValidationException(f"{field} must not be negative", field=field)
        if self.men_count and self.men_capacity < 1:
            raise ValidationException("men_capacity must be at least 1", field="men_capacity")
        if self.women_count and self.women_capacity < 1:
            raise ValidationException(
                "women_capacity must be at least 1", field="women_capacity"
            )
        for field, value in (("men_start", self.men_start), ("women_start", self.women_start)):
            if value < 0:
                raise ValidationException(f"{field} must not be negative", field=field)
        if self.men_count and self.women_count and self._ranges_overlap():
            raise ValidationException(
                "Men's and women's room numbers overlap", field="women_start"
            )

    def _ranges_overlap(self) -> bool:
        men_end = self.men_start + self.men_count
        women_end = self.women_start + self.women_count
        return self.men_start < women_end and self.women_start < men_end

    @property
    def total_rooms(self) -> int:
        """Number of rooms the plan generates."""
        if not self.auto_create_rooms:
            return 0
        return self.men_count + self.women_count

    @property
    def total_capacity(self) -> int:
        """Sum of the capacities of the generated rooms."""
        if not self.auto_create_rooms:
            return 0
        return (
            self.men_count * self.men_capacity
            + self.women_count * self.women_capacity
        )

    def room_specs(self) -> list[RoomSpec]:
        """Enumerate the rooms to create, men's rooms first, in number order."""
        if not self.auto_create_rooms:
            return []
        specs = [
            RoomSpec(str(self.men_start + i), RoomGender.MEN, self.men_capacity)
            for i in range(self.men_count)
        ]
        specs.extend(
            RoomSpec(str(self.women_start + i), RoomGender.WOMEN, self.women_capacity)
            for i in range(self.women_count)
        )
        return specs
