"""
Shared fixtures for leave service tests.
"""

import pytest
from fastapi.testclient import TestClient

from leave_service.core.db import build_engine, build_session_factory, init_db
from leave_service.core.deps import get_storage
from leave_service.core.sql_storage import SqlStorage
from leave_service.core.storage import MemStorage
from leave_service.main import app
from leave_service.schemas.leave import LeaveCreate
from leave_service.schemas.teacher import TeacherCreate


def make_teacher(code="TCH-001", name="Sarah Johnson", department="Mathematics"):
    return TeacherCreate(teacher_id=code, name=name, department=department)


def make_leave(teacher_id=1, leave_type="sick", days=3, reason="Medical appointment", **extra):
    data = {
        "teacherId": teacher_id,
        "leaveType": leave_type,
        "startDate": "2026-03-02",
        "endDate": "2026-03-04",
        "days": days,
        "reason": reason,
    }
    data.update(extra)
    return LeaveCreate.model_validate(data)


@pytest.fixture
def storage():
    """Empty in-memory store."""
    return MemStorage()


@pytest.fixture
async def sql_storage():
    """SqlStorage on a fresh in-memory SQLite database."""
    engine = build_engine("sqlite+aiosqlite://")
    await init_db(engine)
    yield SqlStorage(build_session_factory(engine))
    await engine.dispose()


@pytest.fixture
def client(storage):
    """TestClient whose routes use the `storage` fixture."""
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
