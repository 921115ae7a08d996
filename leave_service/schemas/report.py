from typing import Dict, List, Literal

from leave_service.schemas.base import CamelModel

TimeRange = Literal["1month", "3months", "6months", "1year"]


class CategoryDays(CamelModel):
    casual: int = 0
    sick: int = 0
    duty: int = 0
    other: int = 0


class DepartmentLeaveDays(CategoryDays):
    department: str


class MonthlyLeaveDays(CategoryDays):
    month: str  # "Mar 2026"


class ReportTotals(CamelModel):
    total_leaves: int
    total_leave_days: int
    teachers_on_leave: int
    pending_approvals: int


class ReportSummary(CamelModel):
    time_range: TimeRange
    totals: ReportTotals
    by_type: Dict[str, int]
    by_department: List[DepartmentLeaveDays]
    monthly_trends: List[MonthlyLeaveDays]
