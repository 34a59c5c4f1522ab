"""
SQLAlchemy model for courses. The free-text schedule is kept as entered; the
parsed weekdays and times are stored beside it when the course is written.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, JSON, String, Text

from planner.core.db import Base


def _utc_now() -> datetime:
    """UTC now as naive datetime for DateTime(timezone=False) columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CourseRecord(Base):
    """One enrolled course."""
    __tablename__ = "courses"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    code = Column(String(64), nullable=True)
    professor = Column(String(255), nullable=True)
    schedule = Column(Text, nullable=True)  # e.g. "MWF 10:00-10:50 AM"
    color = Column(String(16), nullable=False, default="blue")
    credits = Column(Integer, nullable=False, default=3)
    semester = Column(String(64), nullable=True)

    meeting_days = Column(JSON, nullable=True)  # list of weekday numbers, 0 = Monday
    start_time = Column(String(5), nullable=True)  # "HH:MM", 24h
    end_time = Column(String(5), nullable=True)

    created_at = Column(DateTime(timezone=False), default=_utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=False), default=_utc_now, onupdate=_utc_now, nullable=False)
