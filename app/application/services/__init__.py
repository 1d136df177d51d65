"""Application services: capacity engine, sites, workers, statistics, export, integrity."""

from app.application.services.authorization_service import AuthorizationService
from app.application.services.capacity_service import CapacityService
from app.application.services.export_service import ExportService
from app.application.services.integrity_service import IntegrityService
from app.application.services.site_service import SiteService
from app.application.services.statistics_service import StatisticsService
from app.application.services.worker_service import WorkerService

__all__ = [
    "AuthorizationService",
    "CapacityService",
    "ExportService",
    "IntegrityService",
    "SiteService",
    "StatisticsService",
    "WorkerService",
]
