"""
HTTP client for a running planner API. Mirrors the PlannerStore surface
(store.courses.list(), store.snapshot(), ...) so the CLI can read a remote
planner the same way it reads the local database.
"""
import logging
from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Optional

import requests

from planner.analytics.schedule import Weekday
from planner.core.entities import Assignment, Course, Grade, PlannerSnapshot, StudySession
from planner.core.errors import RemoteStoreError


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def _parse_time(value: Optional[str]) -> Optional[time]:
    return time.fromisoformat(value) if value else None


def course_from_json(data: Dict[str, Any]) -> Course:
    values = {name: data.get(name) for name in Course._fields}
    days = data.get("meeting_days")
    values["meeting_days"] = frozenset(Weekday(d) for d in days) if days is not None else None
    values["start_time"] = _parse_time(data.get("start_time"))
    values["end_time"] = _parse_time(data.get("end_time"))
    return Course(**values)


def assignment_from_json(data: Dict[str, Any]) -> Assignment:
    values = {name: data.get(name) for name in Assignment._fields}
    values["due_date"] = _parse_datetime(data.get("due_date"))
    return Assignment(**values)


def grade_from_json(data: Dict[str, Any]) -> Grade:
    return Grade(**{name: data.get(name) for name in Grade._fields})


def study_session_from_json(data: Dict[str, Any]) -> StudySession:
    values = {name: data.get(name) for name in StudySession._fields}
    values["date"] = _parse_datetime(data.get("date"))
    return StudySession(**values)


def _to_json(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: value.isoformat() if isinstance(value, (date, datetime, time)) else value
        for key, value in fields.items()
    }


class RemoteCollection:
    """One entity kind behind /api/<kind>/data."""

    def __init__(self, remote: "RemoteStore", kind: str, parse: Callable[[Dict[str, Any]], Any]):
        self.remote = remote
        self.kind = kind
        self.parse = parse

    @property
    def path(self) -> str:
        return f"/api/{self.kind}/data"

    def list(self) -> List[Any]:
        return [self.parse(row) for row in self.remote.request("GET", self.path)]

    def get(self, record_id: int) -> Any:
        return self.parse(self.remote.request("GET", f"{self.path}/{record_id}"))

    def create(self, fields: Dict[str, Any]) -> Any:
        return self.parse(self.remote.request("POST", self.path, json=_to_json(fields)))

    def update(self, record_id: int, fields: Dict[str, Any]) -> Any:
        return self.parse(self.remote.request("PATCH", f"{self.path}/{record_id}", json=_to_json(fields)))

    def delete(self, record_id: int) -> int:
        return self.remote.request("DELETE", f"{self.path}/{record_id}")["id"]


class RemoteStore:
    def __init__(self, base_url: str, timeout: float = 10.0, retries: int = 1):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retries = retries
        self.session = requests.Session()
        self.logger = logging.getLogger(self.__class__.__name__)

        self.courses = RemoteCollection(self, "courses", course_from_json)
        self.assignments = RemoteCollection(self, "assignments", assignment_from_json)
        self.grades = RemoteCollection(self, "grades", grade_from_json)
        self.study_sessions = RemoteCollection(self, "study_sessions", study_session_from_json)

    def __getitem__(self, name: str) -> RemoteCollection:
        return getattr(self, name)

    def request(self, method: str, path: str, **kwargs) -> Any:
        """Send one request; connection errors and timeouts are retried self.retries times."""
        url = f"{self.base_url}{path}"
        attempt = 0
        while True:
            try:
                response = self.session.request(method, url, timeout=self.timeout, **kwargs)
                break
            except (requests.ConnectionError, requests.Timeout) as e:
                if attempt >= self.retries:
                    raise RemoteStoreError(f"Could not reach planner API at {self.base_url}: {e}") from e
                attempt += 1
                self.logger.warning(f"{method} {url} failed ({e}), retrying ({attempt}/{self.retries})")

        if response.status_code >= 400:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            raise RemoteStoreError(f"{method} {path} returned {response.status_code}: {detail}")
        return response.json()

    def snapshot(self) -> PlannerSnapshot:
        return PlannerSnapshot(
            courses=self.courses.list(),
            assignments=self.assignments.list(),
            grades=self.grades.list(),
            study_sessions=self.study_sessions.list(),
        )
