import calendar
from datetime import datetime, timezone
from typing import Dict, List, Optional

from leave_service.core.entities import LeaveRequest
from leave_service.core.leave_policy import LeaveStatus, LeaveType
from leave_service.core.storage import Storage
from leave_service.schemas.report import (
    DepartmentLeaveDays,
    MonthlyLeaveDays,
    ReportSummary,
    ReportTotals,
)

# time_range -> 개월 수
TIME_RANGE_MONTHS: Dict[str, int] = {
    "1month": 1,
    "3months": 3,
    "6months": 6,
    "1year": 12,
}
DEFAULT_TIME_RANGE = "6months"


def sub_months(value: datetime, months: int) -> datetime:
    """months개월 전 같은 날짜 (말일은 해당 월의 마지막 날로 맞춤)."""
    index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _empty_days() -> Dict[str, int]:
    return {t.value: 0 for t in LeaveType}


def _filter_by_range(
    leaves: List[LeaveRequest], start: datetime, end: datetime
) -> List[LeaveRequest]:
    return [l for l in leaves if start <= l.submitted_at <= end]


async def build_summary(
    storage: Storage,
    time_range: str = DEFAULT_TIME_RANGE,
    now: Optional[datetime] = None,
) -> ReportSummary:
    """
    대시보드용 집계. submitted_at 기준으로 [now - N개월, now] 구간만 본다.

    - totals: 신청 건수, 총 일수, 휴가 쓴 교사 수, 대기(pending) 건수
    - by_type: 카테고리별 일수
    - by_department: 모든 교사의 학과를 0으로 채운 뒤 카테고리별 일수
    - monthly_trends: N+1개의 월 버킷 ("Mar 2026"), 오래된 순
    """
    months = TIME_RANGE_MONTHS[time_range]
    now = now or datetime.now(timezone.utc)
    start = sub_months(now, months)

    leaves = _filter_by_range(await storage.get_leaves(), start, now)
    teachers = await storage.get_teachers()

    by_type = _empty_days()
    for leave in leaves:
        if leave.leave_type in by_type:
            by_type[leave.leave_type] += leave.days

    department_of = {t.id: t.department for t in teachers}
    by_department: Dict[str, Dict[str, int]] = {}
    for teacher in teachers:
        by_department.setdefault(teacher.department, _empty_days())
    for leave in leaves:
        department = department_of.get(leave.teacher_id)
        if department is not None and leave.leave_type in by_department[department]:
            by_department[department][leave.leave_type] += leave.days

    monthly: Dict[str, Dict[str, int]] = {}
    for i in range(months + 1):
        monthly[sub_months(now, i).strftime("%b %Y")] = _empty_days()
    for leave in leaves:
        bucket = monthly.get(leave.submitted_at.strftime("%b %Y"))
        if bucket is not None and leave.leave_type in bucket:
            bucket[leave.leave_type] += leave.days

    totals = ReportTotals(
        total_leaves=len(leaves),
        total_leave_days=sum(l.days for l in leaves),
        teachers_on_leave=len({l.teacher_id for l in leaves}),
        pending_approvals=sum(1 for l in leaves if l.status == LeaveStatus.PENDING.value),
    )

    return ReportSummary(
        time_range=time_range,
        totals=totals,
        by_type=by_type,
        by_department=[
            DepartmentLeaveDays(department=name, **days)
            for name, days in by_department.items()
        ],
        monthly_trends=[
            MonthlyLeaveDays(month=month, **days)
            for month, days in reversed(list(monthly.items()))
        ],
    )
