import logging
import math
from typing import Iterable, List, Tuple, Union

from gpacalc.core.grades import convert, parse_number
from gpacalc.core.models import (
    CourseEntry,
    ErrorKind,
    Evaluation,
    FieldTag,
    GpaResult,
    GradeType,
    ParsedCourse,
    ValidationError,
)


logger = logging.getLogger(__name__)

NO_VALID_COURSES_MESSAGE = "Please enter at least one course with valid grade and credits to calculate GPA."
CREDITS_TOO_LARGE_MESSAGE = "Total credit hours are too large to calculate GPA."


def _conversion_message(label: str, grade_type: GradeType, raw: str) -> str:
    if grade_type is GradeType.LETTER:
        return f'{label}: "{raw}" is not a valid letter grade (use A, A-, B+, ..., F).'
    return f'{label}: percentage must be between 0 and 100 (got "{raw}").'


def parse_row(entry: CourseEntry, index: int) -> Union[ParsedCourse, ValidationError]:
    """
    Validate one non-blank row. Checks run credits, grade presence, grade
    conversion; only the first failure is reported.
    """
    label = entry.display_name(index)

    credits = parse_number(entry.raw_credits)
    if credits is None or credits <= 0:
        return ValidationError(
            row_index=index,
            kind=ErrorKind.INVALID_CREDITS,
            message=f"{label}: please enter credit hours greater than 0.",
            fields=frozenset({FieldTag.CREDITS}),
        )

    raw_grade = (entry.raw_grade or "").strip()
    if not raw_grade:
        return ValidationError(
            row_index=index,
            kind=ErrorKind.MISSING_GRADE,
            message=f"{label}: please enter a grade.",
            fields=frozenset({FieldTag.GRADE}),
        )

    conversion = convert(entry.grade_type, raw_grade)
    if not conversion.ok:
        return ValidationError(
            row_index=index,
            kind=conversion.error.kind,
            message=_conversion_message(label, entry.grade_type, raw_grade),
            fields=frozenset({FieldTag.GRADE, FieldTag.GRADE_TYPE}),
        )

    return ParsedCourse(
        index=index,
        name=label,
        grade_type=entry.grade_type,
        grade=raw_grade,
        credits=credits,
        points=conversion.points,
    )


def collect_rows(entries: Iterable[CourseEntry]) -> Tuple[List[ParsedCourse], List[ValidationError]]:
    courses: List[ParsedCourse] = []
    errors: List[ValidationError] = []

    for index, entry in enumerate(entries):
        if entry.is_blank:
            continue
        parsed = parse_row(entry, index)
        if isinstance(parsed, ValidationError):
            errors.append(parsed)
        else:
            courses.append(parsed)

    return courses, errors


def evaluate(entries: Iterable[CourseEntry]) -> Evaluation:
    """
    GPA = Σ(points * credits) / Σ(credits) over every valid, non-blank row.

    All row errors are collected before returning; when any exist no GPA
    is computed.
    """
    courses, errors = collect_rows(entries)
    if errors:
        logger.debug("Evaluation rejected with %d row error(s)", len(errors))
        return Evaluation(errors=tuple(errors))

    weighted_sum = 0.0
    total_credits = 0.0
    for course in courses:
        weighted_sum += course.points * course.credits
        total_credits += course.credits

    if total_credits == 0:
        return Evaluation(
            errors=(
                ValidationError(
                    row_index=None,
                    kind=ErrorKind.NO_VALID_COURSES,
                    message=NO_VALID_COURSES_MESSAGE,
                ),
            )
        )

    if not (math.isfinite(total_credits) and math.isfinite(weighted_sum)):
        return Evaluation(
            errors=(
                ValidationError(
                    row_index=None,
                    kind=ErrorKind.INVALID_CREDITS,
                    message=CREDITS_TOO_LARGE_MESSAGE,
                    fields=frozenset({FieldTag.CREDITS}),
                ),
            )
        )

    gpa = weighted_sum / total_credits
    logger.debug("Evaluated %d course(s): gpa=%.4f credits=%.1f", len(courses), gpa, total_credits)
    return Evaluation(result=GpaResult(gpa=gpa, total_credits=total_credits, courses=tuple(courses)))


def format_gpa(gpa: float) -> str:
    return f"{gpa:.2f}"


def format_credits(credits: float) -> str:
    return f"{credits:.1f}"


def summary_note(total_credits: float) -> str:
    return f"Based on {format_credits(total_credits)} total credit hours using a 4.0 scale."
