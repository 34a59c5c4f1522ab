"""
Plain records handed to the analytics engine. Stores return these; the engine
only reads them. Relationships are by course_id value only.
"""
from collections import namedtuple

COURSE_COLORS = ("red", "blue", "green", "purple", "yellow", "pink")
PRIORITIES = ("low", "medium", "high")
STATUSES = ("pending", "in-progress", "completed")

Course = namedtuple(
    "Course",
    [
        "id",
        "name",
        "code",
        "professor",
        "schedule",      # free text, e.g. "MWF 10:00-10:50 AM"
        "color",         # one of COURSE_COLORS, display only
        "credits",
        "semester",
        "meeting_days",  # frozenset of Weekday, or None when never parsed
        "start_time",    # datetime.time or None
        "end_time",      # datetime.time or None
    ],
    defaults=(None,) * 11,
)

Assignment = namedtuple(
    "Assignment",
    [
        "id",
        "title",
        "course_id",
        "due_date",     # naive datetime
        "priority",     # low | medium | high
        "status",       # pending | in-progress | completed
        "description",
        "grade",        # optional percentage, informational only
    ],
    defaults=(None,) * 8,
)

Grade = namedtuple(
    "Grade",
    ["id", "course_id", "category", "weight", "score", "total"],
    defaults=(None,) * 6,
)

StudySession = namedtuple(
    "StudySession",
    [
        "id",
        "course_id",
        "date",      # naive datetime, recorded at session completion
        "duration",  # minutes
        "notes",
    ],
    defaults=(None,) * 5,
)

PlannerSnapshot = namedtuple(
    "PlannerSnapshot",
    ["courses", "assignments", "grades", "study_sessions"],
    defaults=((), (), (), ()),
)
