from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text

from leave_service.core.db import Base


class LeaveRequest(Base):
    __tablename__ = "leaves"

    id = Column(Integer, primary_key=True, autoincrement=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False, index=True)
    leave_type = Column(String(20), nullable=False)   # "casual", "sick", "duty", "other"
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    days = Column(Integer, nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    approved_by = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False)


class LeaveUsage(Base):
    __tablename__ = "leave_usage"

    id = Column(Integer, primary_key=True, autoincrement=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False, unique=True)
    casual_used = Column(Integer, nullable=False, default=0)
    sick_used = Column(Integer, nullable=False, default=0)
    duty_used = Column(Integer, nullable=False, default=0)
    other_used = Column(Integer, nullable=False, default=0)
