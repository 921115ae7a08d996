"""
Read-side projections used by the HTTP layer, plus leave submission.

Storage returns None for missing records; this module turns that into
NotFoundError where the caller needs a definite answer.
"""
from typing import List, Optional

from leave_service.core.accounting import usage_balance
from leave_service.core.entities import LeaveRequest, LeaveUsage, Teacher
from leave_service.core.exceptions import NotFoundError, ValidationError
from leave_service.core.leave_policy import LeaveType
from leave_service.core.storage import Storage
from leave_service.schemas.leave import LeaveCreate, LeaveUpdate

ALL_TYPES = "all"


async def get_teacher_or_404(storage: Storage, teacher_id: int) -> Teacher:
    teacher = await storage.get_teacher(teacher_id)
    if teacher is None:
        raise NotFoundError("Teacher not found")
    return teacher


async def get_leave_or_404(storage: Storage, leave_id: int) -> LeaveRequest:
    leave = await storage.get_leave(leave_id)
    if leave is None:
        raise NotFoundError("Leave not found")
    return leave


async def search_teachers(storage: Storage, query: Optional[str]) -> List[Teacher]:
    query = (query or "").strip()
    if not query:
        raise ValidationError("Search query is required")
    return await storage.search_teachers(query)


async def list_teacher_leaves(
    storage: Storage,
    teacher_id: int,
    leave_type: Optional[str] = None,
) -> List[LeaveRequest]:
    """
    leave_type이 None / "all" / 알 수 없는 값이면 필터 없이 전체.
    해당 카테고리 신청이 없으면 빈 리스트.
    """
    valid_types = {t.value for t in LeaveType}
    if leave_type and leave_type != ALL_TYPES and leave_type in valid_types:
        return await storage.get_leaves_by_teacher_and_type(teacher_id, leave_type)
    return await storage.get_leaves_by_teacher(teacher_id)


async def submit_leave(storage: Storage, payload: LeaveCreate) -> LeaveRequest:
    """검증된 신청을 저장. 교사가 없으면 저장소가 NotFoundError를 던진다."""
    return await storage.create_leave(payload)


async def update_leave(storage: Storage, leave_id: int, payload: LeaveUpdate) -> LeaveRequest:
    leave = await storage.update_leave(leave_id, payload.changes())
    if leave is None:
        raise NotFoundError("Leave not found")
    return leave


async def get_leave_usage(storage: Storage, teacher_id: int) -> LeaveUsage:
    usage = await storage.get_leave_usage(teacher_id)
    if usage is None:
        raise NotFoundError("Leave usage not found")
    return usage


async def get_leave_balance(storage: Storage, teacher_id: int) -> dict:
    """
    교사 정보 카드용 잔여 일수.
    사용량 레코드가 아직 없으면 0으로 간주한다 (저장소에는 만들지 않음).
    """
    await get_teacher_or_404(storage, teacher_id)

    usage = await storage.get_leave_usage(teacher_id)
    if usage is None:
        usage = LeaveUsage(id=0, teacher_id=teacher_id)

    return {
        "teacher_id": teacher_id,
        "balances": usage_balance(usage),
    }
