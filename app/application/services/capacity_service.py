"""Capacity consistency engine: keeps site totals in line with their rooms.

A site's totalRooms/totalCapacity are cache fields recomputed by a full
rescan of its rooms. Recalculation triggered as a side effect of a room
mutation is best effort (the room change stands and a warning is
returned); site cascade deletion is fail-fast (the site survives any room
deletion failure).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from app.application.dtos.capacity import (
    BULK_CREATION_WARNING,
    RECALCULATION_WARNING,
    CapacityRecalculation,
    CascadeDeleteResult,
    RoomMutationResult,
    SiteCreationResult,
)
from app.application.interfaces.repositories import IRoomRepository, ISiteRepository
from app.domain.entities import RoomEntity, SiteEntity
from app.domain.enums import RoomGender
from app.domain.exceptions import (
    HousingException,
    PartialCascadeFailureException,
    RecalculationFailureException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import RoomPlan

logger = logging.getLogger(__name__)


class CapacityService:
    """Room and site mutations that affect site capacity totals."""

    def __init__(self, site_repo: ISiteRepository, room_repo: IRoomRepository) -> None:
        self.site_repo = site_repo
        self.room_repo = room_repo

    async def recalculate_site_capacity(self, site_id: str) -> CapacityRecalculation:
        """Rescan the site's rooms and write totalRooms/totalCapacity.

        One read bounded to the site and one write. Every room document whose
        siteId matches is counted, including ones that fail entity validation.
        Store errors propagate.
        """
        capacities = await self.room_repo.list_capacities_by_site(site_id)
        total_capacity = sum(capacities)
        await self.site_repo.update_totals(site_id, len(capacities), total_capacity)
        logger.info(
            "Recalculated site %s: %d room(s), capacity %d",
            site_id,
            len(capacities),
            total_capacity,
        )
        return CapacityRecalculation(site_id, len(capacities), total_capacity)

    async def _room_changed(
        self,
        room_id: str,
        site_id: str,
        room: RoomEntity | None = None,
    ) -> RoomMutationResult:
        """Recalculate after a room write; a failure becomes a warning."""
        try:
            recalculation = await self.recalculate_site_capacity(site_id)
        except HousingException as e:
            failure = RecalculationFailureException(site_id, e.message)
            logger.warning("%s (room %s): %s", failure.message, room_id, e.message)
            return RoomMutationResult(
                room_id=room_id,
                room=room,
                capacity_changed=True,
                warnings=[RECALCULATION_WARNING],
                recalculation_error=failure.to_dict(),
            )
        return RoomMutationResult(
            room_id=room_id, room=room, capacity_changed=True, recalculation=recalculation
        )

    async def create_site_with_rooms(
        self,
        name: str,
        plan: RoomPlan,
        admin_ids: list[str] | None = None,
        total_rooms: int = 0,
        total_capacity: int = 0,
    ) -> SiteCreationResult:
        """Create the site, then its planned rooms concurrently.

        With auto-creation the totals come from the plan (a rescan would race
        the in-flight room writes); without it the given totals are stored
        as is. Failed room creations are reported, not rolled back.
        """
        if plan.auto_create_rooms:
            total_rooms, total_capacity = plan.total_rooms, plan.total_capacity
        elif total_rooms < 0 or total_capacity < 0:
            raise ValidationException("Site totals must not be negative", field="totalRooms")

        site = await self.site_repo.create(
            name=name,
            total_rooms=total_rooms,
            total_capacity=total_capacity,
            admin_ids=admin_ids or [],
        )
        logger.info("Created site %s (%s)", site.id, site.name)

        specs = plan.room_specs()
        if not specs:
            return SiteCreationResult(site=site)

        results = await asyncio.gather(
            *(
                self.room_repo.create(site.id, spec.number, spec.gender, spec.capacity)
                for spec in specs
            ),
            return_exceptions=True,
        )
        rooms: list[RoomEntity] = []
        failed: list[str] = []
        for spec, result in zip(specs, results, strict=True):
            if isinstance(result, HousingException):
                logger.warning(
                    "Site %s: room %s not created: %s", site.id, spec.number, result.message
                )
                failed.append(spec.number)
            elif isinstance(result, BaseException):
                raise result
            else:
                rooms.append(result)

        warnings = []
        if failed:
            warnings.append(
                BULK_CREATION_WARNING.format(count=len(failed), numbers=", ".join(failed))
            )
        logger.info("Site %s: %d/%d room(s) created", site.id, len(rooms), len(specs))
        return SiteCreationResult(
            site=site, rooms=rooms, failed_room_numbers=failed, warnings=warnings
        )

    async def delete_site_cascade(self, site_id: str) -> CascadeDeleteResult:
        """Delete every room of the site one by one, then the site.

        Stops at the first room that cannot be deleted and raises
        PartialCascadeFailureException; the site document is then left in
        place. Room deletion is idempotent, so retrying from the start is safe.
        """
        room_ids = await self.room_repo.list_ids_by_site(site_id)
        logger.info("Deleting site %s with %d room(s)", site_id, len(room_ids))
        deleted: list[str] = []
        for index, room_id in enumerate(room_ids):
            try:
                await self.room_repo.delete(room_id)
            except HousingException as e:
                logger.error(
                    "Cascade for site %s stopped at room %s (%d/%d): %s",
                    site_id,
                    room_id,
                    index + 1,
                    len(room_ids),
                    e.message,
                )
                raise PartialCascadeFailureException(
                    site_id=site_id,
                    deleted_room_ids=deleted,
                    remaining_room_ids=room_ids[index:],
                    failed_room_id=room_id,
                    reason=e.message,
                ) from e
            deleted.append(room_id)
            logger.info(
                "Site %s: deleted room %s (%d/%d)", site_id, room_id, index + 1, len(room_ids)
            )
        await self.site_repo.delete(site_id)
        logger.info("Deleted site %s", site_id)
        return CascadeDeleteResult(site_id=site_id, deleted_room_ids=deleted)

    async def update_room_capacity(self, room_id: str, new_capacity: int) -> RoomMutationResult:
        """Set a room's capacity; never below its current occupants."""
        return await self.update_room(room_id, capacity=new_capacity)

    async def update_room(
        self,
        room_id: str,
        number: str | None = None,
        gender: RoomGender | None = None,
        capacity: int | None = None,
    ) -> RoomMutationResult:
        """Edit number, dormitory and/or capacity. Occupants are left untouched.

        All checks run before the write. The site is recalculated only when
        the capacity actually changed.
        """
        room = await self._get_room(room_id)
        fields: dict = {}
        if number is not None:
            fields["number"] = number.strip()
        if gender is not None:
            fields["gender"] = gender
        if capacity is not None:
            room.check_capacity(capacity)
            fields["capacity"] = capacity
        if not fields:
            raise ValidationException("No room attribute to update")

        updated = replace(room, **fields)
        await self.room_repo.update(room_id, **fields)
        capacity_changed = updated.capacity != room.capacity
        logger.info(
            "Updated room %s (site %s)%s",
            room_id,
            room.site_id,
            f": capacity {room.capacity} -> {updated.capacity}" if capacity_changed else "",
        )

        if capacity_changed:
            return await self._room_changed(room_id, room.site_id, updated)
        return RoomMutationResult(room_id=room_id, room=updated)

    async def create_room(
        self,
        site_id: str,
        number: str,
        gender: RoomGender,
        capacity: int,
    ) -> RoomMutationResult:
        """Create one room outside the bulk flow, then recalculate its site."""
        await self._get_site(site_id)
        room = await self.room_repo.create(site_id, number, gender, capacity)
        logger.info("Created room %s (%s) on site %s", room.id, room.number, site_id)
        return await self._room_changed(room.id, site_id, room)

    async def delete_room(self, room_id: str) -> RoomMutationResult:
        """Delete one room, then recalculate its site. A missing room is a no-op.

        The site is read from the raw document, so a room that no longer
        validates as an entity can still be deleted.
        """
        site_id = await self.room_repo.get_site_id(room_id)
        await self.room_repo.delete(room_id)
        if not site_id:
            return RoomMutationResult(room_id=room_id)
        logger.info("Deleted room %s (site %s)", room_id, site_id)
        return await self._room_changed(room_id, site_id)

    async def _get_room(self, room_id: str) -> RoomEntity:
        room = await self.room_repo.get_by_id(room_id)
        if room is None:
            raise ResourceNotFoundException("room", room_id)
        return room

    async def _get_site(self, site_id: str) -> SiteEntity:
        site = await self.site_repo.get_by_id(site_id)
        if site is None:
            raise ResourceNotFoundException("site", site_id)
        return site
