import csv
import io
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from gpacalc.core.gpa import collect_rows
from gpacalc.core.models import CourseEntry, ErrorKind, ParsedCourse, ValidationError


EXPORT_FILENAME = "gpa-courses.csv"
CSV_HEADER = ("Course", "Grade Type", "Grade", "Credits", "GPA Points")
EMPTY_EXPORT_MESSAGE = "Nothing to export. Please enter at least one valid course."


@dataclass(frozen=True)
class ExportResult:
    csv: Optional[str] = None
    error: Optional[ValidationError] = None
    rows: Tuple[ParsedCourse, ...] = ()
    # Errors of the rows left out of the export, kept for field highlighting.
    errors: Tuple[ValidationError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.csv is not None


def _format_credits(credits: float) -> str:
    if credits.is_integer():
        return str(int(credits))
    return format(Decimal(repr(credits)), "f")


def _to_record(course: ParsedCourse) -> Tuple[str, ...]:
    return (
        course.name,
        course.grade_type.label,
        course.grade,
        _format_credits(course.credits),
        f"{course.points:.2f}",
    )


def render_csv(courses: Iterable[ParsedCourse]) -> str:
    """Header unquoted, every data field quoted, CRLF between lines."""
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\r\n").writerow(CSV_HEADER)
    rows = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    for course in courses:
        rows.writerow(_to_record(course))
    return buffer.getvalue()[: -len("\r\n")]


def export_csv(entries: Iterable[CourseEntry]) -> ExportResult:
    courses, errors = collect_rows(entries)
    if not courses:
        return ExportResult(
            error=ValidationError(
                row_index=None,
                kind=ErrorKind.EMPTY_EXPORT_SET,
                message=EMPTY_EXPORT_MESSAGE,
            ),
            errors=tuple(errors),
        )
    return ExportResult(csv=render_csv(courses), rows=tuple(courses), errors=tuple(errors))
