from typing import Dict

from fastapi import APIRouter, Depends, Query

from leave_service.core.deps import get_storage
from leave_service.core.leave_policy import LEAVE_LIMITS
from leave_service.core.storage import Storage
from leave_service.schemas.report import ReportSummary, TimeRange
from leave_service.services.reports import DEFAULT_TIME_RANGE, build_summary

router = APIRouter(
    prefix="/api",
    tags=["reports"],
)


@router.get(
    "/leave-limits",
    response_model=Dict[str, int],
)
async def get_leave_limits():
    """카테고리별 연간 허용 일수 (표시용)"""
    return {leave_type.value: limit for leave_type, limit in LEAVE_LIMITS.items()}


@router.get(
    "/reports/summary",
    response_model=ReportSummary,
)
async def get_report_summary(
    time_range: TimeRange = Query(DEFAULT_TIME_RANGE, alias="range"),
    storage: Storage = Depends(get_storage),
):
    """
    대시보드 집계.
    GET /api/reports/summary?range=3months   (1month | 3months | 6months | 1year)
    """
    return await build_summary(storage, time_range)
