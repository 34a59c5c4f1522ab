"""
PlannerStore: the one object that owns the four entity stores.
Constructed with a Database and the store classes registered by plugins, then
passed to whatever needs it.
"""
import logging
from typing import Any, Dict, Type

from planner.core.db import Database
from planner.core.entities import PlannerSnapshot
from planner.core.store import EntityStore

logger = logging.getLogger(__name__)

SNAPSHOT_KINDS = ("courses", "assignments", "grades", "study_sessions")


class PlannerStore:
    def __init__(self, database: Database, store_classes: Dict[str, Type[EntityStore]]):
        self.database = database
        self.stores: Dict[str, EntityStore] = {
            name: store_class(database) for name, store_class in store_classes.items()
        }
        missing = [kind for kind in SNAPSHOT_KINDS if kind not in self.stores]
        if missing:
            raise RuntimeError(f"No store registered for: {', '.join(missing)}")
        logger.debug(f"PlannerStore ready with stores: {sorted(self.stores)}")

    def __getitem__(self, name: str) -> EntityStore:
        return self.stores[name]

    @property
    def courses(self) -> Any:
        return self.stores["courses"]

    @property
    def assignments(self) -> Any:
        return self.stores["assignments"]

    @property
    def grades(self) -> Any:
        return self.stores["grades"]

    @property
    def study_sessions(self) -> Any:
        return self.stores["study_sessions"]

    def snapshot(self) -> PlannerSnapshot:
        """Fresh lists of all four collections."""
        return PlannerSnapshot(
            courses=self.courses.list(),
            assignments=self.assignments.list(),
            grades=self.grades.list(),
            study_sessions=self.study_sessions.list(),
        )

    def is_empty(self) -> bool:
        return all(not self.stores[kind].list() for kind in SNAPSHOT_KINDS)
