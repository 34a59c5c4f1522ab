"""
SQLAlchemy model for assignments. course_id is checked by the store, not by a
database constraint, so deleting a course leaves its assignments in place.
"""
from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from planner.core.db import Base
from planner.plugins.courses.models import _utc_now


class AssignmentRecord(Base):
    """One assignment. due_date is naive local time."""
    __tablename__ = "assignments"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    course_id = Column(Integer, nullable=False, index=True)
    due_date = Column(DateTime(timezone=False), nullable=False, index=True)
    priority = Column(String(16), nullable=False, default="medium")  # low | medium | high
    status = Column(String(16), nullable=False, default="pending")  # pending | in-progress | completed
    description = Column(Text, nullable=True)
    grade = Column(Float, nullable=True)  # informational percentage, not used for course grades

    created_at = Column(DateTime(timezone=False), default=_utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=False), default=_utc_now, onupdate=_utc_now, nullable=False)
