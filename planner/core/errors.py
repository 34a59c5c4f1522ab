"""
Error types raised at the store boundary and by the remote store client.
The analytics engine raises none of these.
"""
from typing import Optional


class PlannerError(Exception):
    """Base class for planner errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PlannerError):
    """Raised when an id is absent from a collection."""

    def __init__(self, kind: str, record_id: int):
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class ValidationError(PlannerError):
    """Raised when a create/update payload is invalid or references a missing course."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class RemoteStoreError(PlannerError):
    """Raised when the remote planner API cannot be reached or rejects a request."""
