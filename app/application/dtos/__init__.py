"""Application DTOs (no dependency on the document store)."""

from app.application.dtos.capacity import (
    BULK_CREATION_WARNING,
    RECALCULATION_WARNING,
    CapacityRecalculation,
    CascadeDeleteResult,
    RoomMutationResult,
    SiteCreationResult,
)
from app.application.dtos.integrity import IntegrityIssue, IntegrityReport
from app.application.dtos.scope import CallerScope
from app.application.dtos.statistics import (
    AGE_GROUPS,
    DashboardStats,
    DetailedStats,
    SiteStats,
)
from app.application.dtos.worker import WorkerCommand

__all__ = [
    "AGE_GROUPS",
    "BULK_CREATION_WARNING",
    "RECALCULATION_WARNING",
    "CallerScope",
    "CapacityRecalculation",
    "CascadeDeleteResult",
    "DashboardStats",
    "DetailedStats",
    "IntegrityIssue",
    "IntegrityReport",
    "RoomMutationResult",
    "SiteCreationResult",
    "SiteStats",
    "WorkerCommand",
]
