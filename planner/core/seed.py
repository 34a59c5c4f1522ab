"""
Seed data loader. A seed file is YAML with up to four top-level lists:
courses, assignments, grades, study_sessions. Course-scoped rows name their
course with course_code (matched against the codes created from the same file
or already stored) or with a literal course_id.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from planner.core.errors import ValidationError
from planner.core.planner_store import PlannerStore

logger = logging.getLogger(__name__)


def load_seed_file(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path).expanduser()
    logger.info(f"Loading seed file: {path}")
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValidationError(f"Seed file {path} must contain a mapping at the top level")
    return data


def _resolve_course(row: Dict[str, Any], codes: Dict[str, int]) -> Dict[str, Any]:
    row = dict(row)
    code = row.pop("course_code", None)
    if code is not None:
        if code not in codes:
            raise ValidationError(f"Unknown course_code in seed data: {code}", field="course_code")
        row["course_id"] = codes[code]
    return row


def apply_seed(store: PlannerStore, data: Dict[str, Any]) -> Dict[str, int]:
    """
    Create every record in data in one transaction; any invalid row leaves the
    store untouched. Returns the number created per kind.
    Courses go first so later rows can refer to them by code.
    """
    created: Dict[str, int] = {}
    codes = {c.code: c.id for c in store.courses.list() if c.code}

    with store.database.session_scope() as session:
        courses: List[Any] = store.courses.bulk_create(data.get("courses") or [], session=session)
        codes.update({c.code: c.id for c in courses if c.code})
        created["courses"] = len(courses)

        for kind in ("assignments", "grades", "study_sessions"):
            rows = [_resolve_course(row, codes) for row in data.get(kind) or []]
            created[kind] = len(store[kind].bulk_create(rows, session=session))

    logger.info(f"Seed applied: {created}")
    return created
