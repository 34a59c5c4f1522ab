"""
Schedule matching. A course schedule is free text such as "MWF 10:00-10:50 AM"
or "TTh 2:00-3:15 PM"; parse_schedule() turns it into a set of weekdays and a
time range once, and meets_on() answers against that structure.

Recognized day encodings:
- tokens made only of day-letter codes: M, T/Tu, W, Th, F, Sa, Su
  (case-sensitive, "Th" is read before "T", so "TTh" is Tuesday and Thursday)
- day names and abbreviations, any case: mon, tue, tues, wed, thu, thur,
  thurs, fri, sat, sun, monday ... sunday
Anything else ("Online", "Asynchronous", "AM", "Room 204") adds no day, so such
schedules never meet on any day. This is a convention-bound parser, not a
general calendar parser.
"""
import enum
import re
from collections import namedtuple
from datetime import date, datetime, time
from typing import List, Optional, Sequence, Union

from planner.core.entities import Course


class Weekday(enum.IntEnum):
    """Same numbering as date.weekday()."""
    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6


Schedule = namedtuple("Schedule", ["days", "start", "end", "raw"], defaults=(frozenset(), None, None, ""))

_LETTER_CODES = {
    "M": Weekday.MON,
    "T": Weekday.TUE,
    "Tu": Weekday.TUE,
    "W": Weekday.WED,
    "Th": Weekday.THU,
    "F": Weekday.FRI,
    "Sa": Weekday.SAT,
    "Su": Weekday.SUN,
}
# Two-letter codes first so "Th" wins over "T"
_LETTER_RE = re.compile(r"Th|Tu|Sa|Su|M|T|W|F")
_LETTER_TOKEN_RE = re.compile(r"^(?:Th|Tu|Sa|Su|M|T|W|F)+$")

_DAY_NAMES = {
    "mon": Weekday.MON, "monday": Weekday.MON,
    "tue": Weekday.TUE, "tues": Weekday.TUE, "tuesday": Weekday.TUE,
    "wed": Weekday.WED, "weds": Weekday.WED, "wednesday": Weekday.WED,
    "thu": Weekday.THU, "thur": Weekday.THU, "thurs": Weekday.THU, "thursday": Weekday.THU,
    "fri": Weekday.FRI, "friday": Weekday.FRI,
    "sat": Weekday.SAT, "saturday": Weekday.SAT,
    "sun": Weekday.SUN, "sunday": Weekday.SUN,
}

_TOKEN_RE = re.compile(r"[A-Za-z]+")
_TIME_RANGE_RE = re.compile(
    r"(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*[-–]\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?"
)

DayLike = Union[date, datetime, Weekday, int, str]


def _days_from_token(token: str) -> List[Weekday]:
    named = _DAY_NAMES.get(token.lower())
    if named is not None:
        return [named]
    if _LETTER_TOKEN_RE.match(token):
        return [_LETTER_CODES[code] for code in _LETTER_RE.findall(token)]
    return []


def _to_24h(hour: int, minute: int, meridiem: Optional[str]) -> Optional[time]:
    if meridiem:
        meridiem = meridiem.upper()
        if not 1 <= hour <= 12:
            return None
        if meridiem == "PM" and hour != 12:
            hour += 12
        elif meridiem == "AM" and hour == 12:
            hour = 0
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return time(hour, minute)


def _parse_time_range(text: str):
    match = _TIME_RANGE_RE.search(text)
    if not match:
        return None, None
    h1, m1, mer1, h2, m2, mer2 = match.groups()
    end = _to_24h(int(h2), int(m2), mer2)
    start = _to_24h(int(h1), int(m1), mer1 or mer2)
    if mer1 is None and mer2 and start is not None and end is not None and start > end:
        # "11:00-12:15 PM": the trailing PM belongs to the end only
        start = _to_24h(int(h1), int(m1), "AM")
    return start, end


def parse_schedule(text: Optional[str]) -> Schedule:
    """Parse a free-text schedule into weekdays and an optional start/end time."""
    raw = text or ""
    days = set()
    for token in _TOKEN_RE.findall(raw):
        days.update(_days_from_token(token))
    start, end = _parse_time_range(raw)
    return Schedule(days=frozenset(days), start=start, end=end, raw=raw)


def weekday_of(day: DayLike) -> Weekday:
    """Normalize a date, weekday number, or day name to a Weekday."""
    if isinstance(day, Weekday):
        return day
    if isinstance(day, (date, datetime)):
        return Weekday(day.weekday())
    if isinstance(day, int) and not isinstance(day, bool):
        return Weekday(day)
    if isinstance(day, str):
        named = _DAY_NAMES.get(day.strip().lower())
        if named is not None:
            return named
    raise ValueError(f"Unrecognized day: {day!r}")


def course_schedule(course: Course) -> Schedule:
    """Structured schedule for a course; parses the text when the store never did."""
    if course.meeting_days is not None:
        return Schedule(
            days=frozenset(course.meeting_days),
            start=course.start_time,
            end=course.end_time,
            raw=course.schedule or "",
        )
    return parse_schedule(course.schedule)


def meets_on(course_or_schedule: Union[Course, Schedule, str], day: DayLike) -> bool:
    """Whether the course (or schedule, or schedule text) meets on the given day."""
    if isinstance(course_or_schedule, Course):
        schedule = course_schedule(course_or_schedule)
    elif isinstance(course_or_schedule, Schedule):
        schedule = course_or_schedule
    else:
        schedule = parse_schedule(course_or_schedule)
    return weekday_of(day) in schedule.days


def classes_on(courses: Sequence[Course], day: DayLike) -> List[Course]:
    """Courses meeting on day, earliest start first; courses without a time go last."""
    weekday = weekday_of(day)
    meeting = []
    for course in courses:
        schedule = course_schedule(course)
        if weekday in schedule.days:
            meeting.append((schedule.start is None, schedule.start or time.min, course.name or "", course))
    meeting.sort(key=lambda item: item[:3])
    return [item[3] for item in meeting]
