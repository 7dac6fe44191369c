from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple, Union


class GradeType(str, Enum):
    LETTER = "letter"
    PERCENT = "percent"

    @property
    def label(self) -> str:
        return "Letter" if self is GradeType.LETTER else "Percent"

    @classmethod
    def parse(cls, value: Union["GradeType", str]) -> "GradeType":
        if isinstance(value, GradeType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported grade type: {value!r}. Use 'letter' or 'percent'.") from exc


class FieldTag(str, Enum):
    GRADE = "grade"
    CREDITS = "credits"
    GRADE_TYPE = "grade_type"


class ErrorKind(str, Enum):
    INVALID_CREDITS = "invalid_credits"
    MISSING_GRADE = "missing_grade"
    INVALID_LETTER_GRADE = "invalid_letter_grade"
    PERCENTAGE_OUT_OF_RANGE = "percentage_out_of_range"
    NO_VALID_COURSES = "no_valid_courses"
    EMPTY_EXPORT_SET = "empty_export_set"


@dataclass(frozen=True)
class CourseEntry:
    """One row as typed by the user; nothing is parsed yet."""

    name: str = ""
    grade_type: GradeType = GradeType.LETTER
    raw_grade: str = ""
    raw_credits: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "grade_type", GradeType.parse(self.grade_type))

    @property
    def is_blank(self) -> bool:
        return not (self.raw_grade or "").strip() and not (self.raw_credits or "").strip()

    def display_name(self, index: int) -> str:
        return (self.name or "").strip() or f"Course {index + 1}"


@dataclass(frozen=True)
class ParsedCourse:
    index: int
    name: str
    grade_type: GradeType
    grade: str
    credits: float
    points: float


@dataclass(frozen=True)
class ValidationError:
    row_index: Optional[int]
    kind: ErrorKind
    message: str
    fields: FrozenSet[FieldTag] = frozenset()


@dataclass(frozen=True)
class GpaResult:
    gpa: float
    total_credits: float
    courses: Tuple[ParsedCourse, ...] = ()


@dataclass(frozen=True)
class Evaluation:
    result: Optional[GpaResult] = None
    errors: Tuple[ValidationError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.result is not None
