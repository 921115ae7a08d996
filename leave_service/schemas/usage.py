from typing import Dict

from pydantic import BaseModel

from leave_service.schemas.base import CamelModel


class LeaveUsageRead(CamelModel):
    id: int
    teacher_id: int
    casual_used: int
    sick_used: int
    duty_used: int
    other_used: int


class CategoryBalance(BaseModel):
    used: int
    limit: int
    remaining: int


class LeaveBalanceRead(CamelModel):
    """교사 정보 카드용: 카테고리별 used / limit / remaining"""
    teacher_id: int
    balances: Dict[str, CategoryBalance]
