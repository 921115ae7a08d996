import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from leave_service.core.accounting import USAGE_FIELDS, apply_usage
from leave_service.core.entities import LeaveRequest, LeaveUsage, Teacher
from leave_service.core.exceptions import DuplicateTeacherError, NotFoundError
from leave_service.core.storage import Storage
from leave_service.models.leave import LeaveRequest as LeaveModel
from leave_service.models.leave import LeaveUsage as LeaveUsageModel
from leave_service.models.teacher import Teacher as TeacherModel
from leave_service.schemas.leave import LeaveCreate
from leave_service.schemas.teacher import TeacherCreate

logger = logging.getLogger(__name__)

# SQLite / MySQL BIGINT 범위. 이 밖의 id는 저장될 수 없으므로 조회 없이 "없음"
DB_INT_MIN = -(2 ** 63)
DB_INT_MAX = 2 ** 63 - 1


def _storable_id(value: int) -> bool:
    return DB_INT_MIN <= value <= DB_INT_MAX


def _to_teacher(row: TeacherModel) -> Teacher:
    return Teacher(
        id=row.id,
        teacher_id=row.teacher_id,
        name=row.name,
        department=row.department,
    )


def _to_leave(row: LeaveModel) -> LeaveRequest:
    submitted_at = row.submitted_at
    # SQLite는 타임존을 저장하지 않으므로 UTC로 간주
    if submitted_at.tzinfo is None:
        submitted_at = submitted_at.replace(tzinfo=timezone.utc)

    return LeaveRequest(
        id=row.id,
        teacher_id=row.teacher_id,
        leave_type=row.leave_type,
        start_date=row.start_date,
        end_date=row.end_date,
        days=row.days,
        reason=row.reason,
        status=row.status,
        approved_by=row.approved_by,
        notes=row.notes,
        submitted_at=submitted_at,
    )


def _to_usage(row: LeaveUsageModel) -> LeaveUsage:
    return LeaveUsage(
        id=row.id,
        teacher_id=row.teacher_id,
        casual_used=row.casual_used,
        sick_used=row.sick_used,
        duty_used=row.duty_used,
        other_used=row.other_used,
    )


class SqlStorage(Storage):
    """
    SQLAlchemy(Async) 기반 저장소.
    leave insert와 사용량 누적은 하나의 트랜잭션에서 처리한다.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # ---------- Teacher ----------

    async def get_teachers(self) -> List[Teacher]:
        async with self._session_factory() as session:
            result = await session.execute(select(TeacherModel).order_by(TeacherModel.id))
            return [_to_teacher(row) for row in result.scalars().all()]

    async def get_teacher(self, teacher_id: int) -> Optional[Teacher]:
        if not _storable_id(teacher_id):
            return None
        async with self._session_factory() as session:
            row = await session.get(TeacherModel, teacher_id)
            return _to_teacher(row) if row is not None else None

    async def get_teacher_by_code(self, code: str) -> Optional[Teacher]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(TeacherModel).where(TeacherModel.teacher_id == code)
            )
            row = result.scalar_one_or_none()
            return _to_teacher(row) if row is not None else None

    async def search_teachers(self, query: str) -> List[Teacher]:
        q = query.lower()
        stmt = (
            select(TeacherModel)
            .where(
                or_(
                    func.lower(TeacherModel.name).contains(q, autoescape=True),
                    func.lower(TeacherModel.teacher_id).contains(q, autoescape=True),
                )
            )
            .order_by(TeacherModel.id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_to_teacher(row) for row in result.scalars().all()]

    async def create_teacher(self, data: TeacherCreate) -> Teacher:
        if await self.get_teacher_by_code(data.teacher_id) is not None:
            raise DuplicateTeacherError(data.teacher_id)

        row = TeacherModel(
            teacher_id=data.teacher_id,
            name=data.name,
            department=data.department,
        )
        async with self._session_factory() as session:
            session.add(row)
            try:
                await session.commit()
            except IntegrityError as exc:
                # 동시에 같은 코드로 생성된 경우 (unique 제약)
                await session.rollback()
                raise DuplicateTeacherError(data.teacher_id) from exc

        logger.info("Teacher created: id=%s, teacherId=%s", row.id, row.teacher_id)
        return _to_teacher(row)

    # ---------- Leave ----------

    async def get_leaves(self) -> List[LeaveRequest]:
        async with self._session_factory() as session:
            result = await session.execute(select(LeaveModel).order_by(LeaveModel.id))
            return [_to_leave(row) for row in result.scalars().all()]

    async def get_leave(self, leave_id: int) -> Optional[LeaveRequest]:
        if not _storable_id(leave_id):
            return None
        async with self._session_factory() as session:
            row = await session.get(LeaveModel, leave_id)
            return _to_leave(row) if row is not None else None

    async def get_leaves_by_teacher(self, teacher_id: int) -> List[LeaveRequest]:
        if not _storable_id(teacher_id):
            return []
        stmt = (
            select(LeaveModel)
            .where(LeaveModel.teacher_id == teacher_id)
            .order_by(LeaveModel.id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_to_leave(row) for row in result.scalars().all()]

    async def get_leaves_by_teacher_and_type(
        self, teacher_id: int, leave_type: str
    ) -> List[LeaveRequest]:
        if not _storable_id(teacher_id):
            return []
        stmt = (
            select(LeaveModel)
            .where(
                LeaveModel.teacher_id == teacher_id,
                LeaveModel.leave_type == leave_type,
            )
            .order_by(LeaveModel.id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_to_leave(row) for row in result.scalars().all()]

    async def create_leave(self, data: LeaveCreate) -> LeaveRequest:
        if not _storable_id(data.teacher_id):
            raise NotFoundError("Teacher not found")

        async with self._session_factory() as session:
            async with session.begin():
                teacher = await session.get(TeacherModel, data.teacher_id)
                if teacher is None:
                    raise NotFoundError("Teacher not found")

                row = LeaveModel(
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
                session.add(row)
                await self._apply_usage(session, data.teacher_id, data.leave_type, data.days)

        logger.info(
            "Leave recorded: id=%s, teacherId=%s, leaveType=%s, days=%s",
            row.id,
            row.teacher_id,
            row.leave_type,
            row.days,
        )
        return _to_leave(row)

    async def update_leave(
        self, leave_id: int, changes: Dict[str, Any]
    ) -> Optional[LeaveRequest]:
        # 사용량은 재계산하지 않는다 (생성 시점에만 누적)
        if not _storable_id(leave_id):
            return None
        async with self._session_factory() as session:
            async with session.begin():
                row = await session.get(LeaveModel, leave_id)
                if row is None:
                    return None
                for field, value in changes.items():
                    setattr(row, field, value)

        logger.info("Leave updated: id=%s, fields=%s", leave_id, sorted(changes))
        return _to_leave(row)

    # ---------- LeaveUsage ----------

    async def get_leave_usage(self, teacher_id: int) -> Optional[LeaveUsage]:
        if not _storable_id(teacher_id):
            return None
        async with self._session_factory() as session:
            row = await self._find_usage(session, teacher_id)
            return _to_usage(row) if row is not None else None

    async def apply_usage(self, teacher_id: int, leave_type: str, days: int) -> LeaveUsage:
        async with self._session_factory() as session:
            async with session.begin():
                row = await self._apply_usage(session, teacher_id, leave_type, days)
        return _to_usage(row)

    async def initialize_usage(self, teacher_id: int) -> LeaveUsage:
        async with self._session_factory() as session:
            async with session.begin():
                row = await self._usage_for(session, teacher_id)
        return _to_usage(row)

    @staticmethod
    async def _find_usage(session: AsyncSession, teacher_id: int) -> Optional[LeaveUsageModel]:
        result = await session.execute(
            select(LeaveUsageModel).where(LeaveUsageModel.teacher_id == teacher_id)
        )
        return result.scalar_one_or_none()

    async def _usage_for(self, session: AsyncSession, teacher_id: int) -> LeaveUsageModel:
        row = await self._find_usage(session, teacher_id)
        if row is None:
            row = LeaveUsageModel(
                teacher_id=teacher_id,
                casual_used=0,
                sick_used=0,
                duty_used=0,
                other_used=0,
            )
            session.add(row)
            await session.flush()
        return row

    async def _apply_usage(
        self, session: AsyncSession, teacher_id: int, leave_type: str, days: int
    ) -> LeaveUsageModel:
        row = await self._usage_for(session, teacher_id)
        updated = apply_usage(_to_usage(row), leave_type, days)
        for field in USAGE_FIELDS.values():
            setattr(row, field, getattr(updated, field))

        logger.info(
            "Leave usage updated: teacherId=%s, leaveType=%s, +%s days",
            teacher_id,
            leave_type,
            days,
        )
        return row
