"""Worker use cases: CRUD, filtered listing and room choices.

Age is never taken from input; it is derived from the birth year every
time a worker entity is built. The dormitory label comes from the chosen
room's gender. Rooms are not updated when a worker is assigned: the
room's occupant list and the worker's room number are independent fields
(see IntegrityService).
"""

from __future__ import annotations

import logging

from app.application.dtos.worker import WorkerCommand
from app.application.interfaces.repositories import (
    IRoomRepository,
    ISiteRepository,
    IWorkerRepository,
)
from app.domain.entities import (
    UNSAVED_ID,
    RoomEntity,
    WorkerEntity,
    dormitory_label,
)
from app.domain.enums import WorkerGender, WorkerStatus
from app.domain.exceptions import ResourceNotFoundException

logger = logging.getLogger(__name__)


def room_sort_key(room: RoomEntity) -> tuple[int, int, str]:
    """Numeric room numbers first, in numeric order; others after, by text."""
    number = room.number.strip()
    if number.isdigit():
        return (0, int(number), number)
    return (1, 0, number)


class WorkerService:
    def __init__(
        self,
        worker_repo: IWorkerRepository,
        room_repo: IRoomRepository,
        site_repo: ISiteRepository,
    ) -> None:
        self.worker_repo = worker_repo
        self.room_repo = room_repo
        self.site_repo = site_repo

    async def list_workers(
        self,
        site_id: str | None = None,
        gender: WorkerGender | None = None,
        search: str | None = None,
        status: WorkerStatus | None = None,
    ) -> list[WorkerEntity]:
        """Workers matching every given filter, most recent entry first."""
        if site_id is None:
            workers = await self.worker_repo.list_all()
        else:
            workers = await self.worker_repo.list_by_site(site_id)
        if gender is not None:
            workers = [w for w in workers if w.gender == gender]
        if status is not None:
            workers = [w for w in workers if w.status == status]
        if search:
            workers = [w for w in workers if w.matches_search(search)]
        return sorted(workers, key=lambda w: w.entry_date, reverse=True)

    async def get_worker(self, worker_id: str) -> WorkerEntity:
        worker = await self.worker_repo.get_by_id(worker_id)
        if worker is None:
            raise ResourceNotFoundException("worker", worker_id)
        return worker

    async def _dormitory_label(self, command: WorkerCommand) -> str:
        if not command.room_number.strip():
            return ""
        rooms = await self.room_repo.list_by_site(command.site_id)
        number = command.room_number.strip()
        room = next((r for r in rooms if r.number == number), None)
        if room is None:
            logger.warning(
                "Room %s not found on site %s; labelling from worker gender",
                number,
                command.site_id,
            )
            return dormitory_label(command.gender.room_gender)
        return dormitory_label(room.gender)

    async def _require_site(self, site_id: str) -> None:
        if await self.site_repo.get_by_id(site_id) is None:
            raise ResourceNotFoundException("site", site_id)

    def _build(
        self,
        worker_id: str,
        command: WorkerCommand,
        label: str,
        previous: WorkerEntity | None = None,
    ) -> WorkerEntity:
        exit_date = command.exit_date
        exit_reason = command.exit_reason
        if previous is not None:
            exit_date = exit_date or previous.exit_date
            exit_reason = exit_reason or previous.exit_reason
        return WorkerEntity(
            id=worker_id,
            full_name=command.full_name.strip(),
            national_id=command.national_id.strip(),
            gender=command.gender,
            birth_year=command.birth_year,
            site_id=command.site_id,
            entry_date=command.entry_date,
            phone=command.phone.strip(),
            room_number=command.room_number.strip(),
            dormitory_label=label,
            status=command.status,
            exit_date=exit_date,
            exit_reason=exit_reason,
            created_at=previous.created_at if previous else None,
        )

    async def create_worker(self, command: WorkerCommand) -> WorkerEntity:
        """Validate and store a new worker; age is derived from birth_year."""
        self._build(UNSAVED_ID, command, "")  # validates before any store call
        await self._require_site(command.site_id)
        label = await self._dormitory_label(command)
        worker = await self.worker_repo.create(self._build(UNSAVED_ID, command, label))
        logger.info("Created worker %s on site %s", worker.id, worker.site_id)
        return worker

    async def update_worker(self, worker_id: str, command: WorkerCommand) -> WorkerEntity:
        """Rewrite a worker. Unset exit date/reason keep their previous values."""
        previous = await self.get_worker(worker_id)
        self._build(worker_id, command, "", previous)  # validates before any store call
        if command.site_id != previous.site_id:
            await self._require_site(command.site_id)
        label = await self._dormitory_label(command)
        worker = self._build(worker_id, command, label, previous)
        await self.worker_repo.save(worker)
        logger.info("Updated worker %s", worker_id)
        return worker

    async def delete_worker(self, worker_id: str) -> None:
        await self.worker_repo.delete(worker_id)
        logger.info("Deleted worker %s", worker_id)

    async def available_rooms(
        self, site_id: str, gender: WorkerGender
    ) -> list[RoomEntity]:
        """Rooms of the site matching the worker gender, sorted by number.

        Full rooms are included; callers use available_places to flag them.
        """
        rooms = await self.room_repo.list_by_site_and_gender(site_id, gender.room_gender)
        return sorted(rooms, key=room_sort_key)
