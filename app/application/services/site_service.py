"""Site reads, attribute edits and per-site statistics.

Creation and deletion go through CapacityService since they involve rooms.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from app.application.dtos.statistics import SiteStats
from app.application.interfaces.repositories import (
    IRoomRepository,
    ISiteRepository,
    IWorkerRepository,
)
from app.application.services.statistics_service import site_stats
from app.domain.entities import SiteEntity
from app.domain.exceptions import ResourceNotFoundException, ValidationException

logger = logging.getLogger(__name__)


class SiteService:
    def __init__(
        self,
        site_repo: ISiteRepository,
        room_repo: IRoomRepository,
        worker_repo: IWorkerRepository,
    ) -> None:
        self.site_repo = site_repo
        self.room_repo = room_repo
        self.worker_repo = worker_repo

    async def list_sites(
        self, site_id: str | None = None, search: str | None = None
    ) -> list[SiteEntity]:
        """Sites sorted by name; site_id restricts to one site, search matches the name."""
        sites = await self.site_repo.list_all()
        if site_id is not None:
            sites = [s for s in sites if s.id == site_id]
        if search and search.strip():
            needle = search.strip().lower()
            sites = [s for s in sites if needle in s.name.lower()]
        return sorted(sites, key=lambda s: s.name.lower())

    async def get_site(self, site_id: str) -> SiteEntity:
        site = await self.site_repo.get_by_id(site_id)
        if site is None:
            raise ResourceNotFoundException("site", site_id)
        return site

    async def update_site(
        self,
        site_id: str,
        name: str | None = None,
        admin_ids: list[str] | None = None,
    ) -> SiteEntity:
        """Edit name and/or admin ids. The cache totals are never edited here."""
        site = await self.get_site(site_id)
        fields: dict = {}
        if name is not None:
            fields["name"] = name.strip()
        if admin_ids is not None:
            fields["admin_ids"] = list(dict.fromkeys(admin_ids))
        if not fields:
            raise ValidationException("No site attribute to update")
        updated = replace(site, **fields)
        await self.site_repo.update(site_id, **fields)
        logger.info("Updated site %s (%s)", site_id, ", ".join(fields))
        return updated

    async def get_site_stats(self, site_id: str) -> SiteStats:
        site = await self.get_site(site_id)
        rooms = await self.room_repo.list_by_site(site_id)
        workers = await self.worker_repo.list_by_site(site_id)
        return site_stats(site, rooms, workers)

    async def list_site_stats(self, site_id: str | None = None) -> list[SiteStats]:
        """Statistics of every listed site from a single read of rooms and workers."""
        sites = await self.list_sites(site_id)
        rooms = await self.room_repo.list_all()
        workers = await self.worker_repo.list_all()
        return [site_stats(site, rooms, workers) for site in sites]
