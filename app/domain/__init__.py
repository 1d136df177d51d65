"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import RoomEntity, SiteEntity, WorkerEntity
from app.domain.enums import (
    EntryDateFilter,
    ExitReason,
    OccupancyStatus,
    RoomGender,
    WorkerGender,
    WorkerStatus,
)
from app.domain.exceptions import (
    AuthorizationException,
    HousingException,
    PartialCascadeFailureException,
    RecalculationFailureException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import RoomPlan, RoomSpec

__all__ = [
    "AuthorizationException",
    "EntryDateFilter",
    "ExitReason",
    "HousingException",
    "OccupancyStatus",
    "PartialCascadeFailureException",
    "RecalculationFailureException",
    "ResourceNotFoundException",
    "RoomEntity",
    "RoomGender",
    "RoomPlan",
    "RoomSpec",
    "SiteEntity",
    "ValidationException",
    "WorkerEntity",
    "WorkerGender",
    "WorkerStatus",
]
