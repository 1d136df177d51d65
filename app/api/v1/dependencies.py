"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the store collections, repositories and
application services. Routes depend only on these dependencies, not on
infrastructure directly. Tests override get_collections with in-memory
collections.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from app.application.dtos.scope import CallerScope
from app.application.interfaces.repositories import (
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
from app.core.config import get_settings
from app.infrastructure.exceptions import PreconditionFailedError
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.infrastructure.firebase.accessor import FirestoreCollection
from app.infrastructure.firebase.client import get_firestore_client
from app.infrastructure.firebase.repositories import (
    FirestoreRoomRepository,
    FirestoreSiteRepository,
    FirestoreWorkerRepository,
)

STORE_NOT_CONFIGURED = (
    "Document store not configured (set FIREBASE_SERVICE_ACCOUNT_KEY or "
    "FIREBASE_SERVICE_ACCOUNT_PATH)"
)


@dataclass(frozen=True)
class StoreCollections:
    """The three collection accessors used by the repositories."""

    sites: IDocumentCollection
    rooms: IDocumentCollection
    workers: IDocumentCollection


def _get_firestore_client_or_raise() -> FirestoreRESTClient:
    """Return Firestore client or raise PreconditionFailedError (503)."""
    client = get_firestore_client()
    if client is None:
        raise PreconditionFailedError(STORE_NOT_CONFIGURED, status_code=503)
    return client


def build_collections(client: FirestoreRESTClient) -> StoreCollections:
    settings = get_settings()
    interval = settings.subscription_poll_interval_seconds
    return StoreCollections(
        sites=FirestoreCollection(client, settings.collection_sites, poll_interval=interval),
        rooms=FirestoreCollection(client, settings.collection_rooms, poll_interval=interval),
        workers=FirestoreCollection(client, settings.collection_workers, poll_interval=interval),
    )


def get_collections() -> StoreCollections:
    """Collection accessors over the process-wide Firestore client."""
    return build_collections(_get_firestore_client_or_raise())


def get_site_repo(
    collections: Annotated[StoreCollections, Depends(get_collections)],
) -> ISiteRepository:
    return FirestoreSiteRepository(collections.sites)


def get_room_repo(
    collections: Annotated[StoreCollections, Depends(get_collections)],
) -> IRoomRepository:
    return FirestoreRoomRepository(collections.rooms)


def get_worker_repo(
    collections: Annotated[StoreCollections, Depends(get_collections)],
) -> IWorkerRepository:
    return FirestoreWorkerRepository(collections.workers)


def get_capacity_service(
    site_repo: Annotated[ISiteRepository, Depends(get_site_repo)],
    room_repo: Annotated[IRoomRepository, Depends(get_room_repo)],
) -> CapacityService:
    """Build the capacity consistency engine (site + room repositories)."""
    return CapacityService(site_repo, room_repo)


def get_site_service(
    site_repo: Annotated[ISiteRepository, Depends(get_site_repo)],
    room_repo: Annotated[IRoomRepository, Depends(get_room_repo)],
    worker_repo: Annotated[IWorkerRepository, Depends(get_worker_repo)],
) -> SiteService:
    return SiteService(site_repo, room_repo, worker_repo)


def get_worker_service(
    worker_repo: Annotated[IWorkerRepository, Depends(get_worker_repo)],
    room_repo: Annotated[IRoomRepository, Depends(get_room_repo)],
    site_repo: Annotated[ISiteRepository, Depends(get_site_repo)],
) -> WorkerService:
    return WorkerService(worker_repo, room_repo, site_repo)


def get_statistics_service(
    site_repo: Annotated[ISiteRepository, Depends(get_site_repo)],
    room_repo: Annotated[IRoomRepository, Depends(get_room_repo)],
    worker_repo: Annotated[IWorkerRepository, Depends(get_worker_repo)],
) -> StatisticsService:
    """Build StatisticsService with the recent-arrival window from settings."""
    settings = get_settings()
    return StatisticsService(
        site_repo,
        room_repo,
        worker_repo,
        recent_arrivals_days=settings.recent_arrivals_days,
        recent_workers_limit=settings.recent_workers_limit,
    )


def get_integrity_service(
    room_repo: Annotated[IRoomRepository, Depends(get_room_repo)],
    worker_repo: Annotated[IWorkerRepository, Depends(get_worker_repo)],
) -> IntegrityService:
    return IntegrityService(room_repo, worker_repo)


def get_export_service() -> ExportService:
    return ExportService(sheet_name=get_settings().export_sheet_name)


def get_authorization_service() -> AuthorizationService:
    return AuthorizationService()


def get_caller_scope(request: Request) -> CallerScope:
    """Caller identity and site restriction from the gateway headers.

    An empty or absent site header means an unscoped (super admin) caller.
    """
    settings = get_settings()
    user_id = request.headers.get(settings.user_id_header_name) or None
    site_id = request.headers.get(settings.site_scope_header_name) or None
    return CallerScope(
        user_id=user_id.strip() if user_id else None,
        site_id=site_id.strip() if site_id else None,
    )

