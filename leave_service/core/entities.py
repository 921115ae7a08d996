from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    id: int
    teacher_id: str  # 외부 교사 코드 (예: "TCH-2023-001")
    name: str
    department: str


@dataclass(frozen=True)
class LeaveRequest:
    id: int
    teacher_id: int  # Teacher.id 참조
    leave_type: str
    start_date: date
    end_date: date
    days: int
    reason: str
    status: str
    submitted_at: datetime
    approved_by: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class LeaveUsage:
    id: int
    teacher_id: int
    casual_used: int = 0
    sick_used: int = 0
    duty_used: int = 0
    other_used: int = 0
