"""
Per-plugin API for grades. Mounted at /api/grades/.
- /data: CRUD (see planner.api.crud).
- /course/{course_id}: grade components of one course.
- /summary: grades view, overall GPA on the letter-bucket scale, average grade,
  and one row per course.
- /categories: suggested category names.
"""
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from planner.analytics.grades import average_grade, bucketed_gpa, course_grade_report
from planner.api.crud import add_crud_routes
from planner.core.entities import Grade
from planner.plugins.grades.service import GRADE_CATEGORIES


class GradeCreate(BaseModel):
    """Payload for POST /data."""

    course_id: int
    category: str
    weight: float
    score: float
    total: float = 100.0


class GradeUpdate(BaseModel):
    """Payload for PATCH /data/{id}; only the fields sent are changed."""

    course_id: Optional[int] = None
    category: Optional[str] = None
    weight: Optional[float] = None
    score: Optional[float] = None
    total: Optional[float] = None


class GradeResponse(BaseModel):
    """One graded component."""

    id: int
    course_id: int
    category: str
    weight: float
    score: float
    total: float


class CourseGradeResponse(BaseModel):
    """Weighted percentage and grade points for one course."""

    course_id: int
    course_name: Optional[str] = None
    percentage: int
    gpa_points: float
    graded: bool
    component_count: int


class GradesSummaryResponse(BaseModel):
    """Response for GET /summary. overall_gpa is null when there are no courses."""

    overall_gpa: Optional[float] = None
    average_grade: int = 0
    courses: List[CourseGradeResponse] = []


def grade_response(grade: Grade) -> GradeResponse:
    return GradeResponse(**grade._asdict())


def get_router(planner_app) -> Optional[APIRouter]:
    """Return router for this plugin; mounted with prefix /api/grades."""
    router = APIRouter(tags=["Grades"])

    add_crud_routes(
        router,
        lambda: planner_app.store.grades,
        GradeCreate,
        GradeUpdate,
        GradeResponse,
        grade_response,
    )

    @router.get("/course/{course_id}", response_model=List[GradeResponse])
    def course_grades(course_id: int) -> List[GradeResponse]:
        return [grade_response(g) for g in planner_app.store.grades.for_course(course_id)]

    @router.get("/summary", response_model=GradesSummaryResponse)
    def summary() -> GradesSummaryResponse:
        """Overall GPA (bucketed), average grade, and per-course percentages."""
        courses = planner_app.store.courses.list()
        grades = planner_app.store.grades.list()
        names = {c.id: c.name for c in courses}
        rows = [
            CourseGradeResponse(course_name=names.get(row["course_id"]), **row)
            for row in course_grade_report(courses, grades)
        ]
        return GradesSummaryResponse(
            overall_gpa=bucketed_gpa(courses, grades),
            average_grade=average_grade(courses, grades),
            courses=rows,
        )

    @router.get("/categories", response_model=List[str])
    def categories() -> List[str]:
        return list(GRADE_CATEGORIES)

    return router
