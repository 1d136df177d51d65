"""DTOs for the capacity consistency engine (no dependency on the store)."""

from dataclasses import dataclass, field
from typing import Any

from app.domain.entities import RoomEntity, SiteEntity

RECALCULATION_WARNING = "Room updated, but site capacity recalculation failed"
BULK_CREATION_WARNING = "Site created, but {count} room(s) could not be created: {numbers}"


@dataclass(frozen=True)
class CapacityRecalculation:
    """Totals written to a site by one full rescan of its rooms."""

    site_id: str
    total_rooms: int
    total_capacity: int


@dataclass(frozen=True)
class SiteCreationResult:
    """Result of site creation with its auto-generated rooms.

    Room creations that failed are not rolled back; their numbers are listed
    in failed_room_numbers and a warning is added.
    """

    site: SiteEntity
    rooms: list[RoomEntity] = field(default_factory=list)
    failed_room_numbers: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def rooms_created(self) -> int:
        return len(self.rooms)


@dataclass(frozen=True)
class CascadeDeleteResult:
    """Result of a completed site cascade (site and every room deleted)."""

    site_id: str
    deleted_room_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RoomMutationResult:
    """Result of a room create/update/delete.

    room is None after a deletion. recalculation is set when the site's
    totals were rewritten; a failed recalculation leaves it None, adds
    RECALCULATION_WARNING to warnings and keeps the error body in
    recalculation_error.
    """

    room_id: str
    room: RoomEntity | None = None
    capacity_changed: bool = False
    recalculation: CapacityRecalculation | None = None
    warnings: list[str] = field(default_factory=list)
    recalculation_error: dict[str, Any] | None = None
