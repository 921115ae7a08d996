from sqlalchemy import Column, Integer, String

from leave_service.core.db import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    teacher_id = Column(String(50), nullable=False, unique=True)  # 외부 교사 코드
    name = Column(String(100), nullable=False)
    department = Column(String(100), nullable=False)
