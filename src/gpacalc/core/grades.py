import math
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from gpacalc.core.models import ErrorKind, GradeType


LETTER_GRADE_POINTS: Mapping[str, float] = MappingProxyType(
    {
        "A+": 4.0,
        "A": 4.0,
        "A-": 3.7,
        "B+": 3.3,
        "B": 3.0,
        "B-": 2.7,
        "C+": 2.3,
        "C": 2.0,
        "C-": 1.7,
        "D+": 1.3,
        "D": 1.0,
        "D-": 0.7,
        "F": 0.0,
    }
)

# (minimum percentage, points), checked top-down; the first threshold met wins.
PERCENT_BANDS: Tuple[Tuple[float, float], ...] = (
    (93, 4.0),
    (90, 3.7),
    (87, 3.3),
    (83, 3.0),
    (80, 2.7),
    (77, 2.3),
    (73, 2.0),
    (70, 1.7),
    (67, 1.3),
    (65, 1.0),
)

# Plain decimal with optional sign and exponent; rejects "1_0", "nan", "inf".
_NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


@dataclass(frozen=True)
class ConversionError:
    kind: ErrorKind
    raw: str


@dataclass(frozen=True)
class Conversion:
    points: Optional[float] = None
    error: Optional[ConversionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_number(raw: Optional[str]) -> Optional[float]:
    """
    Parse a user-typed number. Returns None for empty, non-numeric,
    NaN and infinite input.
    """
    text = (raw or "").strip()
    if not text or not _NUMBER_RE.fullmatch(text):
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def letter_to_points(letter: str) -> Optional[float]:
    return LETTER_GRADE_POINTS.get(letter.strip().upper())


def percentage_to_points(percentage: float) -> float:
    for minimum, points in PERCENT_BANDS:
        if percentage >= minimum:
            return points
    return 0.0


def convert(grade_type: Union[GradeType, str], raw_grade: str) -> Conversion:
    grade_type = GradeType.parse(grade_type)
    raw = (raw_grade or "").strip()

    if grade_type is GradeType.LETTER:
        points = letter_to_points(raw)
        if points is None:
            return Conversion(error=ConversionError(ErrorKind.INVALID_LETTER_GRADE, raw))
        return Conversion(points=points)

    value = parse_number(raw)
    if value is None or value < 0 or value > 100:
        return Conversion(error=ConversionError(ErrorKind.PERCENTAGE_OUT_OF_RANGE, raw))
    return Conversion(points=percentage_to_points(value))
