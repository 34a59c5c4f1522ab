"""
SQLAlchemy model for logged study sessions.
"""
from sqlalchemy import Column, DateTime, Integer, Text

from planner.core.db import Base
from planner.plugins.courses.models import _utc_now


class StudySessionRecord(Base):
    """One block of study time. date is the client's local time at completion; duration in minutes."""
    __tablename__ = "study_sessions"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, nullable=False, index=True)
    date = Column(DateTime(timezone=False), nullable=False, index=True)
    duration = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=False), default=_utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=False), default=_utc_now, onupdate=_utc_now, nullable=False)
