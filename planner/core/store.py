"""
Entity store base: list/get/create/update/delete over one ORM model.

Ids are assigned by the database on create and never reused. update() merges
only the given fields into the stored record. A missing id raises NotFoundError;
an invalid payload raises ValidationError before anything is written.
"""
import logging
import math
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import select

from planner.core.db import Database
from planner.core.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def to_text(value: Any, field: str, required: bool = False) -> Optional[str]:
    if value is None:
        if required:
            raise ValidationError(f"{field} is required", field=field)
        return None
    text = str(value).strip()
    if required and not text:
        raise ValidationError(f"{field} must not be empty", field=field)
    return text


def to_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", field=field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", field=field)
    if not math.isfinite(number) or not number.is_integer():
        raise ValidationError(f"{field} must be an integer", field=field)
    return int(number)


def to_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", field=field)
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number", field=field)
    return number


def to_choice(value: Any, options: Sequence[str], field: str) -> str:
    if value not in options:
        raise ValidationError(f"{field} must be one of: {', '.join(options)}", field=field)
    return value


def naive_local(dt: datetime) -> datetime:
    """Aware datetimes become naive local wall-clock time; naive ones pass through."""
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def to_datetime(value: Any, field: str) -> datetime:
    """Accept a datetime, date, or ISO string. Aware values become naive local time."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"{field} must be an ISO date/time", field=field)
    else:
        raise ValidationError(f"{field} must be a date/time", field=field)
    return naive_local(dt)


class EntityStore:
    """
    Base store. Subclasses set model, kind and fields, and implement
    _normalize() (per-field coercion), _validate() (whole-record checks on the
    merged record; changes holds only the fields being written), and
    _to_entity() (ORM row -> engine record).
    """

    model: Any = None
    kind: str = "Record"
    fields: Tuple[str, ...] = ()
    required: Tuple[str, ...] = ()
    order_by: Tuple[str, ...] = ("id",)

    def __init__(self, database: Database):
        self.database = database
        self.logger = logging.getLogger(self.__class__.__name__)

    # -- read side ----------------------------------------------------------

    def list(self) -> List[Any]:
        with self.database.session_scope() as session:
            stmt = select(self.model).order_by(*[getattr(self.model, name) for name in self.order_by])
            return [self._to_entity(row) for row in session.execute(stmt).scalars().all()]

    def get(self, record_id: int) -> Any:
        with self.database.session_scope() as session:
            return self._to_entity(self._get_row(session, record_id))

    def exists(self, record_id: int) -> bool:
        with self.database.session_scope() as session:
            return session.get(self.model, record_id) is not None

    # -- write side ---------------------------------------------------------

    def create(self, fields: Dict[str, Any], session=None) -> Any:
        """Insert one record. With session given the caller owns the transaction."""
        values = self._clean(fields)
        missing = [name for name in self.required if values.get(name) is None]
        if missing:
            raise ValidationError(f"{self.kind} is missing required field(s): {', '.join(missing)}", field=missing[0])
        if session is not None:
            entity = self._insert(session, values)
        else:
            with self.database.session_scope() as session:
                entity = self._insert(session, values)
        self.logger.info(f"Created {self.kind} {entity.id}")
        return entity

    def update(self, record_id: int, fields: Dict[str, Any]) -> Any:
        values = self._clean(fields)
        for name in self.required:
            if name in values and values[name] is None:
                raise ValidationError(f"{name} is required", field=name)
        with self.database.session_scope() as session:
            row = self._get_row(session, record_id)
            merged = {name: getattr(row, name) for name in self.fields}
            merged.update(values)
            self._validate(session, merged, values)
            for name, value in self._to_columns(values).items():
                setattr(row, name, value)
            session.flush()
            entity = self._to_entity(row)
        self.logger.info(f"Updated {self.kind} {record_id}: {sorted(values)}")
        return entity

    def delete(self, record_id: int) -> int:
        with self.database.session_scope() as session:
            row = self._get_row(session, record_id)
            session.delete(row)
        self.logger.info(f"Deleted {self.kind} {record_id}")
        return record_id

    def bulk_create(self, rows: Iterable[Dict[str, Any]], session=None) -> List[Any]:
        return [self.create(fields, session=session) for fields in rows]

    def _insert(self, session, values: Dict[str, Any]) -> Any:
        self._validate(session, values, values)
        row = self.model(**self._to_columns(values))
        session.add(row)
        session.flush()
        return self._to_entity(row)

    # -- hooks --------------------------------------------------------------

    def _get_row(self, session, record_id: int) -> Any:
        row = session.get(self.model, record_id)
        if row is None:
            raise NotFoundError(self.kind, record_id)
        return row

    def _clean(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        unknown = sorted(set(fields) - set(self.fields))
        if unknown:
            self.logger.warning(f"Rejected {self.kind} payload with unknown field(s): {unknown}")
            raise ValidationError(f"Unknown {self.kind} field(s): {', '.join(unknown)}", field=unknown[0])
        return self._normalize(dict(fields))

    def _normalize(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return values

    def _validate(self, session, values: Dict[str, Any], changes: Dict[str, Any]) -> None:
        pass

    def _to_columns(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return values

    def _to_entity(self, row: Any) -> Any:
        raise NotImplementedError
