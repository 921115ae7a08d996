"""
Tests for the in-memory store and the accounting it triggers.
"""

import pytest

from conftest import make_leave, make_teacher
from leave_service.core.exceptions import DuplicateTeacherError, NotFoundError, ValidationError
from leave_service.core.storage import MemStorage, seed_sample_data


class TestTeachers:
    """Teacher create / lookup / search."""

    async def test_first_teacher_gets_id_1(self, storage):
        teacher = await storage.create_teacher(make_teacher())

        assert teacher.id == 1
        assert teacher.teacher_id == "TCH-001"
        assert teacher.name == "Sarah Johnson"
        assert teacher.department == "Mathematics"

    async def test_ids_are_sequential(self, storage):
        ids = []
        for i in range(5):
            teacher = await storage.create_teacher(make_teacher(code=f"TCH-{i:03d}"))
            ids.append(teacher.id)

        assert ids == [1, 2, 3, 4, 5]

    async def test_duplicate_code_rejected(self, storage):
        await storage.create_teacher(make_teacher())

        with pytest.raises(DuplicateTeacherError) as exc_info:
            await storage.create_teacher(make_teacher(name="Someone Else"))

        assert isinstance(exc_info.value, ValidationError)
        assert len(await storage.get_teachers()) == 1

    async def test_get_teacher_missing_returns_none(self, storage):
        assert await storage.get_teacher(42) is None

    async def test_get_teacher_by_code(self, storage):
        created = await storage.create_teacher(make_teacher())

        assert await storage.get_teacher_by_code("TCH-001") == created
        assert await storage.get_teacher_by_code("tch-001") is None

    async def test_reads_are_idempotent(self, storage):
        await storage.create_teacher(make_teacher())

        assert await storage.get_teacher(1) == await storage.get_teacher(1)

    async def test_search_is_case_insensitive_substring(self, storage):
        await storage.create_teacher(make_teacher())
        await storage.create_teacher(
            make_teacher(code="TCH-002", name="Michael Brown", department="Science")
        )

        results = await storage.search_teachers("john")

        assert [t.name for t in results] == ["Sarah Johnson"]

    async def test_search_matches_code(self, storage):
        await storage.create_teacher(make_teacher())
        await storage.create_teacher(make_teacher(code="TCH-002", name="Michael Brown"))

        results = await storage.search_teachers("tch-00")

        assert [t.id for t in results] == [1, 2]


class TestLeaves:
    """Leave creation and the usage side effect."""

    @pytest.fixture
    async def teacher(self, storage):
        return await storage.create_teacher(make_teacher())

    async def test_create_leave_applies_usage(self, storage, teacher):
        leave = await storage.create_leave(make_leave(teacher.id, "sick", 3))

        assert leave.id == 1
        assert leave.status == "pending"
        assert leave.submitted_at.tzinfo is not None

        usage = await storage.get_leave_usage(teacher.id)
        assert usage.sick_used == 3
        assert (usage.casual_used, usage.duty_used, usage.other_used) == (0, 0, 0)

    async def test_repeated_casual_leave_accumulates(self, storage, teacher):
        await storage.create_leave(make_leave(teacher.id, "casual", 2))
        await storage.create_leave(make_leave(teacher.id, "casual", 5))

        usage = await storage.get_leave_usage(teacher.id)
        assert usage.casual_used == 7

    async def test_usage_uses_requested_days_not_date_range(self, storage, teacher):
        # 2026-03-02 ~ 2026-03-04 is 3 calendar days; 1 day requested
        await storage.create_leave(make_leave(teacher.id, "duty", 1))

        usage = await storage.get_leave_usage(teacher.id)
        assert usage.duty_used == 1

    async def test_unknown_teacher_rejected_without_side_effects(self, storage):
        with pytest.raises(NotFoundError):
            await storage.create_leave(make_leave(teacher_id=99))

        assert await storage.get_leaves() == []
        assert await storage.get_leave_usage(99) is None

    async def test_single_usage_record_per_teacher(self, storage, teacher):
        await storage.create_leave(make_leave(teacher.id, "sick", 1))
        await storage.create_leave(make_leave(teacher.id, "duty", 2))

        usage = await storage.get_leave_usage(teacher.id)
        assert usage.id == 1
        assert (usage.sick_used, usage.duty_used) == (1, 2)

    async def test_filter_by_teacher_and_type(self, storage, teacher):
        other = await storage.create_teacher(make_teacher(code="TCH-002"))
        await storage.create_leave(make_leave(teacher.id, "sick", 1))
        await storage.create_leave(make_leave(other.id, "sick", 1))
        await storage.create_leave(make_leave(teacher.id, "casual", 1))

        by_teacher = await storage.get_leaves_by_teacher(teacher.id)
        by_type = await storage.get_leaves_by_teacher_and_type(teacher.id, "sick")
        none_found = await storage.get_leaves_by_teacher_and_type(teacher.id, "duty")

        assert [l.id for l in by_teacher] == [1, 3]
        assert [l.id for l in by_type] == [1]
        assert none_found == []

    async def test_update_merges_fields(self, storage, teacher):
        leave = await storage.create_leave(make_leave(teacher.id))

        updated = await storage.update_leave(
            leave.id, {"status": "approved", "approved_by": "Principal"}
        )

        assert updated.status == "approved"
        assert updated.approved_by == "Principal"
        assert updated.reason == leave.reason
        assert updated.submitted_at == leave.submitted_at
        assert await storage.get_leave(leave.id) == updated

    async def test_update_unknown_leave_returns_none(self, storage):
        assert await storage.update_leave(7, {"status": "approved"}) is None

    async def test_update_does_not_recompute_usage(self, storage, teacher):
        leave = await storage.create_leave(make_leave(teacher.id, "sick", 3))

        await storage.update_leave(leave.id, {"days": 10, "status": "rejected"})

        usage = await storage.get_leave_usage(teacher.id)
        assert usage.sick_used == 3

    async def test_usage_equals_sum_of_created_days(self, storage, teacher):
        requests = [("casual", 2), ("sick", 4), ("casual", 1), ("other", 5), ("duty", 3)]
        for leave_type, days in requests:
            await storage.create_leave(make_leave(teacher.id, leave_type, days))

        usage = await storage.get_leave_usage(teacher.id)
        leaves = await storage.get_leaves_by_teacher(teacher.id)
        for leave_type in ("casual", "sick", "duty", "other"):
            expected = sum(l.days for l in leaves if l.leave_type == leave_type)
            assert getattr(usage, f"{leave_type}_used") == expected


class TestUsage:
    """Explicit usage operations."""

    async def test_no_usage_until_first_leave(self, storage):
        teacher = await storage.create_teacher(make_teacher())

        assert await storage.get_leave_usage(teacher.id) is None

    async def test_initialize_usage_is_zero_and_idempotent(self, storage):
        first = await storage.initialize_usage(1)
        second = await storage.initialize_usage(1)

        assert first == second
        assert (first.casual_used, first.sick_used, first.duty_used, first.other_used) == (0, 0, 0, 0)

    async def test_apply_usage_unknown_type_creates_zero_record(self, storage):
        usage = await storage.apply_usage(5, "sabbatical", 3)

        assert usage.teacher_id == 5
        assert (usage.casual_used, usage.sick_used, usage.duty_used, usage.other_used) == (0, 0, 0, 0)


class TestSeedSampleData:
    """seed_sample_data()"""

    async def test_seeds_two_teachers_with_zero_usage(self):
        storage = MemStorage()

        await seed_sample_data(storage)

        teachers = await storage.get_teachers()
        assert [t.teacher_id for t in teachers] == ["TCH-2023-001", "TCH-2023-002"]
        for teacher in teachers:
            usage = await storage.get_leave_usage(teacher.id)
            assert usage is not None
            assert usage.casual_used == 0

    async def test_seed_twice_is_safe(self):
        storage = MemStorage()

        await seed_sample_data(storage)
        await seed_sample_data(storage)

        assert len(await storage.get_teachers()) == 2
