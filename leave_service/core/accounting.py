import logging
from dataclasses import replace
from typing import Dict

from leave_service.core.entities import LeaveUsage
from leave_service.core.leave_policy import LEAVE_LIMITS, LeaveType

logger = logging.getLogger(__name__)

# leave_type -> LeaveUsage 카운터 필드명
USAGE_FIELDS: Dict[str, str] = {
    LeaveType.CASUAL.value: "casual_used",
    LeaveType.SICK.value: "sick_used",
    LeaveType.DUTY.value: "duty_used",
    LeaveType.OTHER.value: "other_used",
}


def apply_usage(usage: LeaveUsage, leave_type: str, days: int) -> LeaveUsage:
    """
    leave_type에 해당하는 카운터에 days를 더한 새 LeaveUsage를 반환.

    알 수 없는 leave_type이면 아무 카운터도 바꾸지 않고 그대로 반환한다.
    (스키마 검증에서 이미 걸러지므로 정상 흐름에서는 발생하지 않음)
    """
    if isinstance(leave_type, LeaveType):
        leave_type = leave_type.value
    field = USAGE_FIELDS.get(leave_type)
    if field is None:
        logger.warning(
            "Ignoring usage for unknown leave type: teacherId=%s, leaveType=%r",
            usage.teacher_id,
            leave_type,
        )
        return usage

    return replace(usage, **{field: getattr(usage, field) + days})


def usage_balance(usage: LeaveUsage) -> Dict[str, Dict[str, int]]:
    """카테고리별 used / limit / remaining. 한도를 넘으면 remaining은 음수."""
    balance: Dict[str, Dict[str, int]] = {}
    for leave_type, limit in LEAVE_LIMITS.items():
        used = getattr(usage, USAGE_FIELDS[leave_type.value])
        balance[leave_type.value] = {
            "used": used,
            "limit": limit,
            "remaining": limit - used,
        }
    return balance
