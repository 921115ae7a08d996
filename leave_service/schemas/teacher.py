from pydantic import Field

from leave_service.schemas.base import CamelModel


class TeacherBase(CamelModel):
    teacher_id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=100)
    department: str = Field(..., min_length=1, max_length=100)


class TeacherCreate(TeacherBase):
    """POST /api/teachers 요청 바디"""
    pass


class Teacher(TeacherBase):
    """응답용 스키마"""
    id: int
