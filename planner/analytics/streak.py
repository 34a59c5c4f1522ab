"""
Study streak: consecutive calendar days with at least one session, counted
backward from today.

Rules:
- a day is a hit when any session's date falls on that calendar day
  (naive local time as recorded, 00:00:00.000 through 23:59:59.999)
- today without a session does not break the streak, it just is not counted
- the first miss before today ends the scan
- at most lookback_days days are inspected, so the streak is capped there (30)
"""
from datetime import date, datetime, timedelta
from typing import Iterable, Union

from planner.core.entities import StudySession

STREAK_LOOKBACK_DAYS = 30


def streak(
    sessions: Iterable[StudySession],
    today: Union[date, datetime],
    lookback_days: int = STREAK_LOOKBACK_DAYS,
) -> int:
    if isinstance(today, datetime):
        today = today.date()
    study_days = {
        s.date.date() if isinstance(s.date, datetime) else s.date
        for s in sessions
        if s.date is not None
    }
    if not study_days:
        return 0

    count = 0
    for offset in range(lookback_days):
        day = today - timedelta(days=offset)
        if day in study_days:
            count += 1
        elif offset > 0:
            break
    return count
