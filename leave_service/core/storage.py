import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from leave_service.core.accounting import apply_usage
from leave_service.core.entities import LeaveRequest, LeaveUsage, Teacher
from leave_service.core.exceptions import DuplicateTeacherError, NotFoundError
from leave_service.schemas.leave import LeaveCreate
from leave_service.schemas.teacher import TeacherCreate

logger = logging.getLogger(__name__)


class Storage(ABC):
    """
    Teacher / LeaveRequest / LeaveUsage 저장소 인터페이스.

    조회 메서드는 대상이 없으면 None을 반환한다 (예외 X).
    404 변환은 호출하는 쪽(서비스/라우터)에서 한다.
    """

    # Teacher
    @abstractmethod
    async def get_teachers(self) -> List[Teacher]: ...

    @abstractmethod
    async def get_teacher(self, teacher_id: int) -> Optional[Teacher]: ...

    @abstractmethod
    async def get_teacher_by_code(self, code: str) -> Optional[Teacher]: ...

    @abstractmethod
    async def search_teachers(self, query: str) -> List[Teacher]: ...

    @abstractmethod
    async def create_teacher(self, data: TeacherCreate) -> Teacher: ...

    # Leave
    @abstractmethod
    async def get_leaves(self) -> List[LeaveRequest]: ...

    @abstractmethod
    async def get_leave(self, leave_id: int) -> Optional[LeaveRequest]: ...

    @abstractmethod
    async def get_leaves_by_teacher(self, teacher_id: int) -> List[LeaveRequest]: ...

    @abstractmethod
    async def get_leaves_by_teacher_and_type(
        self, teacher_id: int, leave_type: str
    ) -> List[LeaveRequest]: ...

    @abstractmethod
    async def create_leave(self, data: LeaveCreate) -> LeaveRequest: ...

    @abstractmethod
    async def update_leave(
        self, leave_id: int, changes: Dict[str, Any]
    ) -> Optional[LeaveRequest]: ...

    # LeaveUsage
    @abstractmethod
    async def get_leave_usage(self, teacher_id: int) -> Optional[LeaveUsage]: ...

    @abstractmethod
    async def apply_usage(self, teacher_id: int, leave_type: str, days: int) -> LeaveUsage: ...

    @abstractmethod
    async def initialize_usage(self, teacher_id: int) -> LeaveUsage:
        """사용량 레코드가 없으면 0으로 채워 생성하고, 있으면 그대로 반환."""


class MemStorage(Storage):
    """
    프로세스 메모리에만 보관하는 저장소.
    id는 컬렉션별로 1부터 순차 발급되고 재사용하지 않는다.
    """

    def __init__(self) -> None:
        self._teachers: Dict[int, Teacher] = {}
        self._leaves: Dict[int, LeaveRequest] = {}
        # key: LeaveUsage.id (teacher_id가 아님)
        self._usages: Dict[int, LeaveUsage] = {}

        self._teacher_seq = 1
        self._leave_seq = 1
        self._usage_seq = 1

        # 쓰기 작업 직렬화 (usage = 적용된 days 합 불변식 유지)
        self._lock = asyncio.Lock()

    # ---------- Teacher ----------

    async def get_teachers(self) -> List[Teacher]:
        return list(self._teachers.values())

    async def get_teacher(self, teacher_id: int) -> Optional[Teacher]:
        return self._teachers.get(teacher_id)

    async def get_teacher_by_code(self, code: str) -> Optional[Teacher]:
        for teacher in self._teachers.values():
            if teacher.teacher_id == code:
                return teacher
        return None

    async def search_teachers(self, query: str) -> List[Teacher]:
        q = query.lower()
        return [
            t for t in self._teachers.values()
            if q in t.name.lower() or q in t.teacher_id.lower()
        ]

    async def create_teacher(self, data: TeacherCreate) -> Teacher:
        async with self._lock:
            if await self.get_teacher_by_code(data.teacher_id) is not None:
                raise DuplicateTeacherError(data.teacher_id)

            teacher = Teacher(
                id=self._teacher_seq,
                teacher_id=data.teacher_id,
                name=data.name,
                department=data.department,
            )
            self._teacher_seq += 1
            self._teachers[teacher.id] = teacher

        logger.info("Teacher created: id=%s, teacherId=%s", teacher.id, teacher.teacher_id)
        return teacher

    # ---------- Leave ----------

    async def get_leaves(self) -> List[LeaveRequest]:
        return list(self._leaves.values())

    async def get_leave(self, leave_id: int) -> Optional[LeaveRequest]:
        return self._leaves.get(leave_id)

    async def get_leaves_by_teacher(self, teacher_id: int) -> List[LeaveRequest]:
        return [l for l in self._leaves.values() if l.teacher_id == teacher_id]

    async def get_leaves_by_teacher_and_type(
        self, teacher_id: int, leave_type: str
    ) -> List[LeaveRequest]:
        return [
            l for l in self._leaves.values()
            if l.teacher_id == teacher_id and l.leave_type == leave_type
        ]

    async def create_leave(self, data: LeaveCreate) -> LeaveRequest:
        """
        1) teacher 존재 확인 (없으면 NotFoundError, 아무것도 저장하지 않음)
        2) id 발급 + submitted_at 기록 후 저장
        3) 요청의 days를 그대로 해당 카테고리 사용량에 누적
        """
        async with self._lock:
            if data.teacher_id not in self._teachers:
                raise NotFoundError("Teacher not found")

            leave = LeaveRequest(
                id=self._leave_seq,
                teacher_id=data.teacher_id,
                leave_type=data.leave_type,
                start_date=data.start_date,
                end_date=data.end_date,
                days=data.days,
                reason=data.reason,
                status=data.status,
                approved_by=data.approved_by,
                notes=data.notes,
                submitted_at=datetime.now(timezone.utc),
            )
            self._leave_seq += 1
            self._leaves[leave.id] = leave

            self._apply_usage(leave.teacher_id, leave.leave_type, leave.days)

        logger.info(
            "Leave recorded: id=%s, teacherId=%s, leaveType=%s, days=%s",
            leave.id,
            leave.teacher_id,
            leave.leave_type,
            leave.days,
        )
        return leave

    async def update_leave(
        self, leave_id: int, changes: Dict[str, Any]
    ) -> Optional[LeaveRequest]:
        # 사용량은 재계산하지 않는다 (생성 시점에만 누적)
        async with self._lock:
            existing = self._leaves.get(leave_id)
            if existing is None:
                return None

            updated = replace(existing, **changes)
            self._leaves[leave_id] = updated

        logger.info("Leave updated: id=%s, fields=%s", leave_id, sorted(changes))
        return updated

    # ---------- LeaveUsage ----------

    async def get_leave_usage(self, teacher_id: int) -> Optional[LeaveUsage]:
        for usage in self._usages.values():
            if usage.teacher_id == teacher_id:
                return usage
        return None

    async def apply_usage(self, teacher_id: int, leave_type: str, days: int) -> LeaveUsage:
        async with self._lock:
            return self._apply_usage(teacher_id, leave_type, days)

    async def initialize_usage(self, teacher_id: int) -> LeaveUsage:
        async with self._lock:
            usage = self._usage_for(teacher_id)
            self._usages[usage.id] = usage
            return usage

    def _usage_for(self, teacher_id: int) -> LeaveUsage:
        # teacher_id로 선형 탐색, 없으면 새 id로 0 레코드 생성 (아직 저장 전)
        for usage in self._usages.values():
            if usage.teacher_id == teacher_id:
                return usage

        usage = LeaveUsage(id=self._usage_seq, teacher_id=teacher_id)
        self._usage_seq += 1
        return usage

    def _apply_usage(self, teacher_id: int, leave_type: str, days: int) -> LeaveUsage:
        usage = apply_usage(self._usage_for(teacher_id), leave_type, days)
        self._usages[usage.id] = usage
        logger.info(
            "Leave usage updated: teacherId=%s, leaveType=%s, +%s days",
            teacher_id,
            leave_type,
            days,
        )
        return usage


SAMPLE_TEACHERS = [
    TeacherCreate(teacher_id="TCH-2023-001", name="Sarah Johnson", department="Mathematics"),
    TeacherCreate(teacher_id="TCH-2023-002", name="Michael Brown", department="Science"),
]


async def seed_sample_data(storage: Storage) -> None:
    """데모용 교사 2명 + 0으로 초기화된 사용량. 이미 있는 코드는 건너뛴다."""
    for data in SAMPLE_TEACHERS:
        if await storage.get_teacher_by_code(data.teacher_id) is not None:
            continue
        teacher = await storage.create_teacher(data)
        await storage.initialize_usage(teacher.id)
        logger.info("Seeded sample teacher: %s (%s)", teacher.name, teacher.teacher_id)
