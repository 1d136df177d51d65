"""Worker API: CRUD, spreadsheet export and room choices for a worker."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from app.api.v1.dependencies import (
    get_authorization_service,
    get_caller_scope,
    get_export_service,
    get_site_repo,
    get_worker_repo,
    get_worker_service,
)
from app.application.dtos.scope import CallerScope
from app.application.interfaces.repositories import ISiteRepository, IWorkerRepository
from app.application.services import AuthorizationService, ExportService, WorkerService
from app.application.services.export_service import XLSX_MEDIA_TYPE, export_filename
from app.application.services.statistics_service import average_ages_by_gender
from app.core.limiter import limit_export, limit_writes
from app.domain.enums import WorkerGender, WorkerStatus
from app.schemas.room import RoomResponse
from app.schemas.worker import WorkerListResponse, WorkerResponse, WorkerWriteRequest

router = APIRouter()


@router.get("", response_model=WorkerListResponse)
async def list_workers(
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    worker_svc: Annotated[WorkerService, Depends(get_worker_service)],
    site_id: str | None = Query(default=None),
    gender: WorkerGender | None = Query(default=None),
    status: WorkerStatus | None = Query(default=None),
    search: str | None = Query(default=None, max_length=255, description="Name or national id contains"),
):
    """Filtered workers (most recent entry first) and average ages of active ones."""
    workers = await worker_svc.list_workers(
        site_id=authz.site_filter(scope, site_id),
        gender=gender,
        search=search,
        status=status,
    )
    men_age, women_age = average_ages_by_gender(workers)
    return WorkerListResponse(
        items=[WorkerResponse.model_validate(w) for w in workers],
        total=len(workers),
        average_age_men=men_age,
        average_age_women=women_age,
    )


@router.get(
    "/export",
    response_class=Response,
    responses={200: {"content": {XLSX_MEDIA_TYPE: {}}}},
)
@limit_export
async def export_workers(
    request: Request,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    worker_svc: Annotated[WorkerService, Depends(get_worker_service)],
    site_repo: Annotated[ISiteRepository, Depends(get_site_repo)],
    export_svc: Annotated[ExportService, Depends(get_export_service)],
    site_id: str | None = Query(default=None),
    gender: WorkerGender | None = Query(default=None),
    status: WorkerStatus | None = Query(default=None),
    search: str | None = Query(default=None, max_length=255),
):
    """Download the filtered workers as an .xlsx spreadsheet."""
    workers = await worker_svc.list_workers(
        site_id=authz.site_filter(scope, site_id),
        gender=gender,
        search=search,
        status=status,
    )
    site_names = {s.id: s.name for s in await site_repo.list_all()}
    content = export_svc.export_workers(workers, site_names)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.get("/available-rooms", response_model=list[RoomResponse])
async def available_rooms(
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    worker_svc: Annotated[WorkerService, Depends(get_worker_service)],
    site_id: str = Query(..., min_length=1),
    gender: WorkerGender = Query(...),
):
    """Rooms of a site for a worker of the given gender; full rooms included."""
    authz.require_site_access(scope, site_id, "room", "read")
    rooms = await worker_svc.available_rooms(site_id, gender)
    return [RoomResponse.model_validate(r) for r in rooms]


@router.post("", response_model=WorkerResponse, status_code=201)
@limit_writes
async def create_worker(
    request: Request,
    body: WorkerWriteRequest,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    worker_svc: Annotated[WorkerService, Depends(get_worker_service)],
):
    authz.require_site_access(scope, body.site_id, "worker", "create")
    worker = await worker_svc.create_worker(body.to_command())
    return WorkerResponse.model_validate(worker)


@router.get("/{worker_id}", response_model=WorkerResponse)
async def get_worker(
    worker_id: str,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    worker_svc: Annotated[WorkerService, Depends(get_worker_service)],
):
    worker = await worker_svc.get_worker(worker_id)
    authz.require_site_access(scope, worker.site_id, "worker", "read")
    return WorkerResponse.model_validate(worker)


@router.put("/{worker_id}", response_model=WorkerResponse)
@limit_writes
async def update_worker(
    request: Request,
    worker_id: str,
    body: WorkerWriteRequest,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    worker_svc: Annotated[WorkerService, Depends(get_worker_service)],
):
    """Replace a worker. Moving a worker to another site needs access to both."""
    existing = await worker_svc.get_worker(worker_id)
    authz.require_site_access(scope, existing.site_id, "worker", "update")
    authz.require_site_access(scope, body.site_id, "worker", "update")
    worker = await worker_svc.update_worker(worker_id, body.to_command())
    return WorkerResponse.model_validate(worker)


@router.delete("/{worker_id}", status_code=204)
@limit_writes
async def delete_worker(
    request: Request,
    worker_id: str,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    worker_repo: Annotated[IWorkerRepository, Depends(get_worker_repo)],
    worker_svc: Annotated[WorkerService, Depends(get_worker_service)],
) -> None:
    """Delete a worker. Room occupancy is not touched."""
    worker = await worker_repo.get_by_id(worker_id)
    if worker is not None:
        authz.require_site_access(scope, worker.site_id, "worker", "delete")
    await worker_svc.delete_worker(worker_id)
