from enum import Enum
from typing import Dict


class LeaveType(str, Enum):
    CASUAL = "casual"
    SICK = "sick"
    DUTY = "duty"
    OTHER = "other"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# 연간 허용 일수. 화면 표시/참고용이며 신청 자체를 막지는 않는다.
LEAVE_LIMITS: Dict[LeaveType, int] = {
    LeaveType.CASUAL: 12,
    LeaveType.SICK: 15,
    LeaveType.DUTY: 10,
    LeaveType.OTHER: 5,
}
