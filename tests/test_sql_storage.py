"""
SqlStorage against an in-memory SQLite database.
"""

import pytest

from conftest import make_leave, make_teacher
from leave_service.core.exceptions import DuplicateTeacherError, NotFoundError


class TestSqlStorage:
    """Same contract as MemStorage, backed by SQLAlchemy."""

    async def test_create_and_get_teacher(self, sql_storage):
        teacher = await sql_storage.create_teacher(make_teacher())

        assert teacher.id == 1
        assert await sql_storage.get_teacher(1) == teacher
        assert await sql_storage.get_teacher_by_code("TCH-001") == teacher
        assert await sql_storage.get_teacher(2) is None

    async def test_duplicate_code_rejected(self, sql_storage):
        await sql_storage.create_teacher(make_teacher())

        with pytest.raises(DuplicateTeacherError):
            await sql_storage.create_teacher(make_teacher())

    async def test_search(self, sql_storage):
        await sql_storage.create_teacher(make_teacher())
        await sql_storage.create_teacher(
            make_teacher(code="TCH-002", name="Michael Brown", department="Science")
        )

        assert [t.name for t in await sql_storage.search_teachers("JOHN")] == ["Sarah Johnson"]
        assert len(await sql_storage.search_teachers("tch")) == 2
        assert await sql_storage.search_teachers("%") == []

    async def test_create_leave_applies_usage(self, sql_storage):
        teacher = await sql_storage.create_teacher(make_teacher())

        leave = await sql_storage.create_leave(make_leave(teacher.id, "sick", 3))
        await sql_storage.create_leave(make_leave(teacher.id, "casual", 2))
        await sql_storage.create_leave(make_leave(teacher.id, "casual", 5))

        assert leave.id == 1
        assert leave.status == "pending"
        assert leave.submitted_at.tzinfo is not None

        usage = await sql_storage.get_leave_usage(teacher.id)
        assert (usage.casual_used, usage.sick_used, usage.duty_used, usage.other_used) == (7, 3, 0, 0)

    async def test_unknown_teacher_rolls_back(self, sql_storage):
        with pytest.raises(NotFoundError):
            await sql_storage.create_leave(make_leave(teacher_id=99))

        assert await sql_storage.get_leaves() == []
        assert await sql_storage.get_leave_usage(99) is None

    async def test_filters(self, sql_storage):
        teacher = await sql_storage.create_teacher(make_teacher())
        await sql_storage.create_leave(make_leave(teacher.id, "sick", 1))
        await sql_storage.create_leave(make_leave(teacher.id, "duty", 1))

        assert len(await sql_storage.get_leaves_by_teacher(teacher.id)) == 2
        assert [l.leave_type for l in await sql_storage.get_leaves_by_teacher_and_type(teacher.id, "duty")] == ["duty"]
        assert await sql_storage.get_leaves_by_teacher_and_type(teacher.id, "other") == []

    async def test_update_leave_keeps_usage(self, sql_storage):
        teacher = await sql_storage.create_teacher(make_teacher())
        leave = await sql_storage.create_leave(make_leave(teacher.id, "sick", 3))

        updated = await sql_storage.update_leave(leave.id, {"status": "approved", "days": 9})

        assert updated.status == "approved"
        assert updated.days == 9
        assert (await sql_storage.get_leave(leave.id)).status == "approved"
        assert (await sql_storage.get_leave_usage(teacher.id)).sick_used == 3
        assert await sql_storage.update_leave(123, {"status": "approved"}) is None

    async def test_initialize_usage(self, sql_storage):
        teacher = await sql_storage.create_teacher(make_teacher())

        first = await sql_storage.initialize_usage(teacher.id)
        second = await sql_storage.initialize_usage(teacher.id)

        assert first == second
        assert first.other_used == 0

    async def test_out_of_range_ids_are_not_found(self, sql_storage):
        huge = 10 ** 30

        assert await sql_storage.get_teacher(huge) is None
        assert await sql_storage.get_leave(huge) is None
        assert await sql_storage.get_leave_usage(huge) is None
        assert await sql_storage.get_leaves_by_teacher(huge) == []
        assert await sql_storage.get_leaves_by_teacher_and_type(huge, "sick") == []
        assert await sql_storage.update_leave(huge, {"status": "approved"}) is None

        with pytest.raises(NotFoundError):
            await sql_storage.create_leave(make_leave(teacher_id=huge))
        assert await sql_storage.get_leaves() == []
