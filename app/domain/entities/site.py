"""Site domain entity (a farm with its dormitories).

Represents the business concept of a site, independent of persistence.
"""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.exceptions import ValidationException


@dataclass
class SiteEntity:
    """Domain entity for a site.

    ``total_rooms`` and ``total_capacity`` are cache fields: the source of
    truth is the set of rooms whose ``site_id`` is this site's id. They are
    rewritten by a full rescan and may be stale between a room mutation and
    the recalculation that follows it.
    """

    id: str
    name: str
    total_rooms: int = 0
    total_capacity: int = 0
    admin_ids: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate site business rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Site ID is required", field="id")
        if not self.name or not self.name.strip():
            raise ValidationException("Site name is required", field="name")
        if self.total_rooms < 0:
            raise ValidationException("totalRooms must not be negative", field="totalRooms")
        if self.total_capacity < 0:
            raise ValidationException(
                "totalCapacity must not be negative", field="totalCapacity"
            )

    def is_administered_by(self, user_id: str) -> bool:
        """Return whether user_id is listed as an admin of this site."""
        return user_id in self.admin_ids
