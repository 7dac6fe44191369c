import logging
from typing import Any, Dict, List, Literal

from fastapi import FastAPI, HTTPException, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, field_validator

from gpacalc.config.settings import settings
from gpacalc.core.export import EXPORT_FILENAME, export_csv
from gpacalc.core.gpa import evaluate, format_credits, format_gpa, summary_note
from gpacalc.core.models import CourseEntry, ParsedCourse, ValidationError


logger = logging.getLogger(__name__)

app = FastAPI(title="GPA Calculator API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CoursePayload(BaseModel):
    name: str = ""
    grade_type: Literal["letter", "percent"] = "letter"
    grade: str = ""
    credits: str = ""

    @field_validator("name", "grade", "credits", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_entry(self) -> CourseEntry:
        return CourseEntry(
            name=self.name,
            grade_type=self.grade_type,
            raw_grade=self.grade,
            raw_credits=self.credits,
        )


class CoursesPayload(BaseModel):
    courses: List[CoursePayload] = Field(default_factory=list)

    def to_entries(self) -> List[CourseEntry]:
        return [course.to_entry() for course in self.courses]


def _error_dict(error: ValidationError) -> Dict[str, Any]:
    return {
        "row_index": error.row_index,
        "kind": error.kind.value,
        "message": error.message,
        "fields": sorted(tag.value for tag in error.fields),
    }


def _course_dict(course: ParsedCourse) -> Dict[str, Any]:
    return {
        "index": course.index,
        "name": course.name,
        "grade_type": course.grade_type.value,
        "grade": course.grade,
        "credits": course.credits,
        "points": course.points,
    }


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/gpa/evaluate")
def evaluate_gpa(payload: CoursesPayload) -> Dict[str, Any]:
    evaluation = evaluate(payload.to_entries())
    if not evaluation.ok:
        logger.info("GPA evaluation rejected: %d error(s)", len(evaluation.errors))
        raise HTTPException(
            status_code=422,
            detail={"errors": [_error_dict(error) for error in evaluation.errors]},
        )

    result = evaluation.result
    logger.info("GPA evaluated over %d course(s)", len(result.courses))
    return {
        "gpa": result.gpa,
        "gpa_display": format_gpa(result.gpa),
        "total_credits": result.total_credits,
        "credits_display": format_credits(result.total_credits),
        "note": summary_note(result.total_credits),
        "courses": [_course_dict(course) for course in result.courses],
    }


@app.post("/gpa/export")
def export_gpa(payload: CoursesPayload) -> Response:
    exported = export_csv(payload.to_entries())
    if not exported.ok:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"errors": [_error_dict(exported.error)]},
        )

    logger.info("Exported %d course(s), skipped %d invalid row(s)", len(exported.rows), len(exported.errors))
    return Response(
        content=exported.csv,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
