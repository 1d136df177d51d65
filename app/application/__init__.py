"""Application layer: interfaces, DTOs, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (collection accessor, repositories).
"""

from app.application.interfaces import (
    IDocumentCollection,
    IRoomRepository,
    ISiteRepository,
    IWorkerRepository,
)
from app.application.services import (
    AuthorizationService,
    CapacityService,
    ExportService,
    IntegrityService,
    SiteService,
    StatisticsService,
    WorkerService,
)

__all__ = [
    "AuthorizationService",
    "CapacityService",
    "ExportService",
    "IDocumentCollection",
    "IRoomRepository",
    "ISiteRepository",
    "IWorkerRepository",
    "IntegrityService",
    "SiteService",
    "StatisticsService",
    "WorkerService",
]
