"""Read-only consistency check between rooms and worker assignments.

Room.occupantRefs (national ids) and Worker.roomNumber are written
independently and never reconciled. This check lists where they disagree;
it changes nothing.
"""

from __future__ import annotations

import logging

from app.application.dtos.integrity import IntegrityIssue, IntegrityReport
from app.application.interfaces.repositories import IRoomRepository, IWorkerRepository
from app.domain.entities import RoomEntity, WorkerEntity

logger = logging.getLogger(__name__)


class IntegrityService:
    OCCUPANCY_MISMATCH = "occupancy_mismatch"
    OVER_CAPACITY = "over_capacity"
    UNKNOWN_OCCUPANT = "unknown_occupant"
    MISPLACED_OCCUPANT = "misplaced_occupant"
    UNLISTED_WORKER = "unlisted_worker"
    MISSING_ROOM = "missing_room"

    def __init__(self, room_repo: IRoomRepository, worker_repo: IWorkerRepository) -> None:
        self.room_repo = room_repo
        self.worker_repo = worker_repo

    async def check(self, site_id: str | None = None) -> IntegrityReport:
        if site_id is None:
            rooms = await self.room_repo.list_all()
            workers = await self.worker_repo.list_all()
        else:
            rooms = await self.room_repo.list_by_site(site_id)
            workers = await self.worker_repo.list_by_site(site_id)
        report = build_report(rooms, workers)
        if report.issues:
            logger.info(
                "Integrity check (site=%s): %d issue(s)", site_id or "all", len(report.issues)
            )
        return report


def _room_issues(
    room: RoomEntity, workers_by_national_id: dict[str, WorkerEntity]
) -> list[IntegrityIssue]:
    issues: list[IntegrityIssue] = []
    base = {"site_id": room.site_id, "room_id": room.id, "room_number": room.number}
    if room.current_occupancy != len(room.occupant_refs):
        issues.append(
            IntegrityIssue(
                kind=IntegrityService.OCCUPANCY_MISMATCH,
                message=(
                    f"Room {room.number} counts {room.current_occupancy} occupant(s) "
                    f"but lists {len(room.occupant_refs)}"
                ),
                **base,
            )
        )
    if room.current_occupancy > room.capacity:
        issues.append(
            IntegrityIssue(
                kind=IntegrityService.OVER_CAPACITY,
                message=(
                    f"Room {room.number} holds {room.current_occupancy} occupant(s) "
                    f"for {room.capacity} place(s)"
                ),
                **base,
            )
        )
    for national_id in room.occupant_refs:
        worker = workers_by_national_id.get(national_id)
        if worker is None:
            issues.append(
                IntegrityIssue(
                    kind=IntegrityService.UNKNOWN_OCCUPANT,
                    message=f"Room {room.number} lists unknown worker {national_id}",
                    national_id=national_id,
                    **base,
                )
            )
        elif worker.site_id != room.site_id or worker.room_number != room.number:
            issues.append(
                IntegrityIssue(
                    kind=IntegrityService.MISPLACED_OCCUPANT,
                    message=(
                        f"Room {room.number} lists {worker.full_name}, "
                        f"whose room is {worker.room_number or 'unset'}"
                    ),
                    worker_id=worker.id,
                    national_id=national_id,
                    **base,
                )
            )
    return issues


def build_report(rooms: list[RoomEntity], workers: list[WorkerEntity]) -> IntegrityReport:
    """Compare rooms and workers; only active workers with a room number are checked."""
    workers_by_national_id = {w.national_id: w for w in workers}
    rooms_by_key = {(r.site_id, r.number): r for r in rooms}
    issues: list[IntegrityIssue] = []
    for room in rooms:
        issues.extend(_room_issues(room, workers_by_national_id))
    for worker in workers:
        if not worker.is_active or not worker.room_number:
            continue
        room = rooms_by_key.get((worker.site_id, worker.room_number))
        if room is None:
            issues.append(
                IntegrityIssue(
                    kind=IntegrityService.MISSING_ROOM,
                    site_id=worker.site_id,
                    message=f"{worker.full_name} is assigned to missing room {worker.room_number}",
                    room_number=worker.room_number,
                    worker_id=worker.id,
                    national_id=worker.national_id,
                )
            )
        elif worker.national_id not in room.occupant_refs:
            issues.append(
                IntegrityIssue(
                    kind=IntegrityService.UNLISTED_WORKER,
                    site_id=worker.site_id,
                    message=f"{worker.full_name} is not listed in room {room.number}",
                    room_id=room.id,
                    room_number=room.number,
                    worker_id=worker.id,
                    national_id=worker.national_id,
                )
            )
    return IntegrityReport(
        rooms_checked=len(rooms), workers_checked=len(workers), issues=issues
    )
