from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import ConfigDict, Field, field_validator

from leave_service.core.leave_policy import LeaveStatus, LeaveType
from leave_service.schemas.base import CamelModel, coerce_date


class LeaveCreate(CamelModel):
    """
    POST /api/leaves 요청 바디.
    days는 기간에서 계산하지 않고 요청값을 그대로 사용한다.
    """
    # bool, 숫자 문자열, float(2.0 포함)는 변환하지 않고 400
    teacher_id: int = Field(..., strict=True)
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int = Field(..., strict=True)
    reason: str
    status: LeaveStatus = Field(LeaveStatus.PENDING, validate_default=True)
    approved_by: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> Any:
        return coerce_date(v)

    @field_validator("days")
    @classmethod
    def validate_days(cls, v: int) -> int:
        if v < 1:
            raise ValueError("At least one day is required")
        return v

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str) -> str:
        if len(v) < 5:
            raise ValueError("Reason must be at least 5 characters")
        return v


class LeaveUpdate(CamelModel):
    """
    PATCH /api/leaves/{id} 요청 바디.

    보낸 필드만 덮어쓴다. 타입/enum만 확인하고 days, reason 최소값은
    다시 검사하지 않으며, 사용량(LeaveUsage)도 재계산하지 않는다.
    """
    model_config = ConfigDict(extra="forbid")  # 정의되지 않은 필드(id, submittedAt 등)는 400

    leave_type: Optional[LeaveType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    days: Optional[int] = Field(None, strict=True)
    reason: Optional[str] = None
    status: Optional[LeaveStatus] = None
    approved_by: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("leave_type", "days", "reason", "status", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field may not be null")
        return v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field may not be null")
        return coerce_date(v)

    def changes(self) -> Dict[str, Any]:
        """요청에 실제로 포함된 필드만 (snake_case 키)."""
        return self.model_dump(exclude_unset=True)


class LeaveRecordRead(CamelModel):
    id: int
    teacher_id: int
    leave_type: str
    start_date: date
    end_date: date
    days: int
    reason: str
    status: str
    approved_by: Optional[str] = None
    notes: Optional[str] = None
    submitted_at: datetime
