"""
SQLAlchemy model for graded components (exam, homework, ...) of a course.
"""
from sqlalchemy import Column, DateTime, Float, Integer, String

from planner.core.db import Base
from planner.plugins.courses.models import _utc_now


class GradeRecord(Base):
    """One graded component. weight is percentage points toward the course grade."""
    __tablename__ = "grades"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, nullable=False, index=True)
    category = Column(String(64), nullable=False)  # Homework, Exams, Quizzes, ...
    weight = Column(Float, nullable=False)
    score = Column(Float, nullable=False)
    total = Column(Float, nullable=False, default=100.0)

    created_at = Column(DateTime(timezone=False), default=_utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=False), default=_utc_now, onupdate=_utc_now, nullable=False)
