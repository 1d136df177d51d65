"""Domain entities.

Pure domain models; no persistence concerns.
"""

from app.domain.entities.room import RoomEntity
from app.domain.entities.site import SiteEntity
from app.domain.entities.worker import WorkerEntity, age_from_birth_year, dormitory_label

# Id carried by an entity validated before the store assigns its real id.
UNSAVED_ID = "unsaved"

__all__ = [
    "UNSAVED_ID",
    "RoomEntity",
    "SiteEntity",
    "WorkerEntity",
    "age_from_birth_year",
    "dormitory_label",
]
