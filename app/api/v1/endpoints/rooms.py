"""Room API: listing with resolved occupants; writes go through CapacityService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_authorization_service,
    get_caller_scope,
    get_capacity_service,
    get_room_repo,
    get_worker_repo,
)
from app.application.dtos.capacity import RoomMutationResult
from app.application.dtos.scope import CallerScope
from app.application.interfaces.repositories import IRoomRepository, IWorkerRepository
from app.application.services import AuthorizationService, CapacityService
from app.application.services.worker_service import room_sort_key
from app.core.limiter import limit_writes
from app.domain.entities import RoomEntity, WorkerEntity
from app.domain.enums import OccupancyStatus, RoomGender
from app.domain.exceptions import ResourceNotFoundException
from app.schemas.room import (
    RoomCapacityUpdate,
    RoomCreateRequest,
    RoomMutationResponse,
    RoomResponse,
    RoomUpdate,
    RoomWithOccupantsResponse,
)

router = APIRouter()


def _with_occupants(
    room: RoomEntity, names_by_national_id: dict[str, str]
) -> RoomWithOccupantsResponse:
    """Room response; occupants that match no worker show their national id."""
    response = RoomWithOccupantsResponse.model_validate(room)
    response.occupant_names = [
        names_by_national_id.get(ref, ref) for ref in room.occupant_refs
    ]
    return response


def _names(workers: list[WorkerEntity]) -> dict[str, str]:
    return {w.national_id: w.full_name for w in workers}


def _mutation_response(result: RoomMutationResult) -> RoomMutationResponse:
    recalculation = result.recalculation
    return RoomMutationResponse(
        room=RoomResponse.model_validate(result.room) if result.room else None,
        room_id=result.room_id,
        capacity_changed=result.capacity_changed,
        site_total_rooms=recalculation.total_rooms if recalculation else None,
        site_total_capacity=recalculation.total_capacity if recalculation else None,
        warnings=result.warnings,
        recalculation_error=result.recalculation_error,
    )


async def _get_room_in_scope(
    room_repo: IRoomRepository,
    authz: AuthorizationService,
    scope: CallerScope,
    room_id: str,
    action: str,
) -> RoomEntity:
    room = await room_repo.get_by_id(room_id)
    if room is None:
        raise ResourceNotFoundException("room", room_id)
    authz.require_site_access(scope, room.site_id, "room", action)
    return room


@router.get("", response_model=list[RoomWithOccupantsResponse])
async def list_rooms(
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    room_repo: Annotated[IRoomRepository, Depends(get_room_repo)],
    worker_repo: Annotated[IWorkerRepository, Depends(get_worker_repo)],
    site_id: str | None = Query(default=None),
    gender: RoomGender | None = Query(default=None),
    status: OccupancyStatus | None = Query(default=None),
    search: str | None = Query(default=None, max_length=20, description="Room number contains"),
):
    """List rooms with occupant names, filtered by site, dormitory, fill level and number."""
    site_filter = authz.site_filter(scope, site_id)
    if site_filter is None:
        rooms = await room_repo.list_all()
        workers = await worker_repo.list_all()
    else:
        rooms = await room_repo.list_by_site(site_filter)
        workers = await worker_repo.list_by_site(site_filter)
    if gender is not None:
        rooms = [r for r in rooms if r.gender == gender]
    if status is not None:
        rooms = [r for r in rooms if r.occupancy_status == status]
    if search and search.strip():
        needle = search.strip().lower()
        rooms = [r for r in rooms if needle in r.number.lower()]
    rooms.sort(key=lambda r: (r.site_id, room_sort_key(r)))
    names = _names(workers)
    return [_with_occupants(r, names) for r in rooms]


@router.post("", response_model=RoomMutationResponse, status_code=201)
@limit_writes
async def create_room(
    request: Request,
    body: RoomCreateRequest,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    capacity_svc: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """Create one room, then recalculate the site totals (warning on failure)."""
    authz.require_site_access(scope, body.site_id, "room", "create")
    result = await capacity_svc.create_room(
        body.site_id, body.number, body.gender, body.capacity
    )
    return _mutation_response(result)


@router.get("/{room_id}", response_model=RoomWithOccupantsResponse)
async def get_room(
    room_id: str,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    room_repo: Annotated[IRoomRepository, Depends(get_room_repo)],
    worker_repo: Annotated[IWorkerRepository, Depends(get_worker_repo)],
):
    room = await _get_room_in_scope(room_repo, authz, scope, room_id, "read")
    workers = await worker_repo.list_by_site(room.site_id)
    return _with_occupants(room, _names(workers))


@router.put("/{room_id}", response_model=RoomMutationResponse)
@limit_writes
async def update_room(
    request: Request,
    room_id: str,
    body: RoomUpdate,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    room_repo: Annotated[IRoomRepository, Depends(get_room_repo)],
    capacity_svc: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """Edit number, dormitory and/or capacity (never below current occupants)."""
    await _get_room_in_scope(room_repo, authz, scope, room_id, "update")
    result = await capacity_svc.update_room(
        room_id, number=body.number, gender=body.gender, capacity=body.capacity
    )
    return _mutation_response(result)


@router.patch("/{room_id}/capacity", response_model=RoomMutationResponse)
@limit_writes
async def update_room_capacity(
    request: Request,
    room_id: str,
    body: RoomCapacityUpdate,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    room_repo: Annotated[IRoomRepository, Depends(get_room_repo)],
    capacity_svc: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """Set the room capacity; the site is recalculated only if it changed."""
    await _get_room_in_scope(room_repo, authz, scope, room_id, "update")
    result = await capacity_svc.update_room_capacity(room_id, body.capacity)
    return _mutation_response(result)


@router.delete("/{room_id}", response_model=RoomMutationResponse)
@limit_writes
async def delete_room(
    request: Request,
    room_id: str,
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    room_repo: Annotated[IRoomRepository, Depends(get_room_repo)],
    capacity_svc: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """Delete a room and recalculate its site. Deleting a missing room succeeds."""
    site_id = await room_repo.get_site_id(room_id)
    if site_id is not None:
        authz.require_site_access(scope, site_id, "room", "delete")
    result = await capacity_svc.delete_room(room_id)
    return _mutation_response(result)
