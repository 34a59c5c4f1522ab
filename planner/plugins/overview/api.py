"""
Per-plugin API for the dashboard overview. Mounted at /api/overview/.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from planner.core.store import naive_local
from planner.plugins.overview.service import build_overview


class OverviewResponse(BaseModel):
    """Response for GET /data. current_gpa is null when there are no courses."""

    generated_at: str
    current_gpa: Optional[float] = None
    active_courses: int = 0
    pending_assignments: int = 0
    weekly_study_minutes: int = 0
    completion_rate: int = 0
    status_counts: Dict[str, int] = {}
    upcoming_assignments: List[Dict[str, Any]] = []
    todays_classes: List[Dict[str, Any]] = []
    recent_sessions: List[Dict[str, Any]] = []


def get_router(planner_app) -> Optional[APIRouter]:
    """Return router for this plugin; mounted with prefix /api/overview."""
    router = APIRouter(tags=["Overview"])

    @router.get("/data", response_model=OverviewResponse)
    def get_data(now: Optional[datetime] = None) -> OverviewResponse:
        """Dashboard figures computed from a fresh snapshot."""
        now = naive_local(now) if now else datetime.now()
        overview = build_overview(planner_app.store.snapshot(), now, planner_app.analytics_settings)
        return OverviewResponse(**overview)

    return router
