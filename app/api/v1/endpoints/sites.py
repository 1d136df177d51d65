"""Site API: thin routes delegating to SiteService and CapacityService.

Creation, update and deletion are reserved to unscoped callers; a scoped
caller only sees its own site.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_authorization_service,
    get_caller_scope,
    get_capacity_service,
    get_site_service,
)
from app.application.dtos.scope import CallerScope
from app.application.services import AuthorizationService, CapacityService, SiteService
from app.core.limiter import limit_writes
from app.schemas.room import RoomResponse
from app.schemas.site import (
    RecalculationResponse,
    SiteCreateRequest,
    SiteCreateResponse,
    SiteDeleteResponse,
    SiteResponse,
    SiteStatsResponse,
    SiteUpdate,
)

router = APIRouter()


@router.get("", response_model=list[SiteResponse])
async def list_sites(
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    site_svc: Annotated[SiteService, Depends(get_site_service)],
    search: str | None = Query(default=None, max_length=255),
):
    """List sites (a scoped caller gets only its own), optionally filtered by name."""
    sites = await site_svc.list_sites(authz.site_filter(scope, None), search)
    return [SiteResponse.model_validate(s) for s in sites]


@router.post("", response_model=SiteCreateResponse, status_code=201)
@limit_writes
async def create_site(
    request: Request,
    body: SiteCreateRequest,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    capacity_svc: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """Create a site and, unless disabled, its rooms from the room plan.

    Rooms that could not be created are listed in failed_room_numbers with
    a warning; the site is still created.
    """
    authz.require_unscoped(scope, "site", "create")
    result = await capacity_svc.create_site_with_rooms(
        name=body.name,
        plan=body.room_plan.to_room_plan(),
        admin_ids=body.admin_ids,
        total_rooms=body.total_rooms,
        total_capacity=body.total_capacity,
    )
    return SiteCreateResponse(
        site=SiteResponse.model_validate(result.site),
        rooms_created=result.rooms_created,
        rooms=[RoomResponse.model_validate(r) for r in result.rooms],
        failed_room_numbers=result.failed_room_numbers,
        warnings=result.warnings,
    )


@router.get("/stats", response_model=list[SiteStatsResponse])
async def list_site_stats(
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    site_svc: Annotated[SiteService, Depends(get_site_service)],
):
    """Per-site statistics for every visible site."""
    stats = await site_svc.list_site_stats(authz.site_filter(scope, None))
    return [SiteStatsResponse.model_validate(s) for s in stats]


@router.get("/{site_id}", response_model=SiteResponse)
async def get_site(
    site_id: str,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    site_svc: Annotated[SiteService, Depends(get_site_service)],
):
    authz.require_site_access(scope, site_id, "site", "read")
    return SiteResponse.model_validate(await site_svc.get_site(site_id))


@router.put("/{site_id}", response_model=SiteResponse)
@limit_writes
async def update_site(
    request: Request,
    site_id: str,
    body: SiteUpdate,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    site_svc: Annotated[SiteService, Depends(get_site_service)],
):
    """Update site name and/or admin ids (totals are maintained by recalculation)."""
    authz.require_unscoped(scope, "site", "update")
    site = await site_svc.update_site(site_id, name=body.name, admin_ids=body.admin_ids)
    return SiteResponse.model_validate(site)


@router.delete("/{site_id}", response_model=SiteDeleteResponse)
@limit_writes
async def delete_site(
    request: Request,
    site_id: str,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    site_svc: Annotated[SiteService, Depends(get_site_service)],
    capacity_svc: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """Delete the site and all its rooms.

    If a room cannot be deleted the cascade stops, the site is kept and the
    response is 502 PARTIAL_CASCADE_FAILURE; calling again resumes safely.
    """
    authz.require_unscoped(scope, "site", "delete")
    await site_svc.get_site(site_id)
    result = await capacity_svc.delete_site_cascade(site_id)
    return SiteDeleteResponse(site_id=result.site_id, deleted_room_ids=result.deleted_room_ids)


@router.post("/{site_id}/recalculate", response_model=RecalculationResponse)
@limit_writes
async def recalculate_site(
    request: Request,
    site_id: str,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    site_svc: Annotated[SiteService, Depends(get_site_service)],
    capacity_svc: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """Rescan the site's rooms and rewrite totalRooms/totalCapacity."""
    authz.require_site_access(scope, site_id, "site", "update")
    await site_svc.get_site(site_id)
    result = await capacity_svc.recalculate_site_capacity(site_id)
    return RecalculationResponse.model_validate(result)


@router.get("/{site_id}/stats", response_model=SiteStatsResponse)
async def get_site_stats(
    site_id: str,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    site_svc: Annotated[SiteService, Depends(get_site_service)],
):
    authz.require_site_access(scope, site_id, "site", "read")
    return SiteStatsResponse.model_validate(await site_svc.get_site_stats(site_id))
