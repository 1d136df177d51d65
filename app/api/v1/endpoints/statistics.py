"""Dashboard, detailed statistics and data integrity report."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import (
    get_authorization_service,
    get_caller_scope,
    get_integrity_service,
    get_statistics_service,
)
from app.application.dtos.scope import CallerScope
from app.application.services import (
    AuthorizationService,
    IntegrityService,
    StatisticsService,
)
from app.domain.enums import EntryDateFilter
from app.schemas.statistics import (
    DashboardResponse,
    IntegrityReportResponse,
    StatisticsResponse,
)

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    stats_svc: Annotated[StatisticsService, Depends(get_statistics_service)],
    site_id: str | None = Query(default=None),
    entry_filter: EntryDateFilter = Query(default=EntryDateFilter.ALL),
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
):
    """Dashboard counters; entry_filter narrows the workers by entry date."""
    stats = await stats_svc.dashboard(
        site_id=authz.site_filter(scope, site_id),
        entry_filter=entry_filter,
        start=start,
        end=end,
    )
    return DashboardResponse.model_validate(stats)


@router.get("", response_model=StatisticsResponse)
async def get_statistics(
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    stats_svc: Annotated[StatisticsService, Depends(get_statistics_service)],
    site_id: str | None = Query(default=None),
):
    """Detailed statistics; the per-site breakdown is only given to unscoped callers."""
    stats = await stats_svc.detailed(
        site_id=authz.site_filter(scope, site_id),
        include_sites=scope.is_unscoped,
    )
    return StatisticsResponse.model_validate(stats)


@router.get("/integrity", response_model=IntegrityReportResponse)
async def get_integrity_report(
    scope: Annotated[CallerScope, Depends(get_caller_scope)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    integrity_svc: Annotated[IntegrityService, Depends(get_integrity_service)],
    site_id: str | None = Query(default=None),
):
    """Compare room occupancy with worker assignments; read only."""
    report = await integrity_svc.check(authz.site_filter(scope, site_id))
    return IntegrityReportResponse.model_validate(report)
