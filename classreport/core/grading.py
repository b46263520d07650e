"""
Grade scale and averaging primitives.

The scale is the single source of numeric grade values: every average, every
approval boundary and every per-goal mean is computed against
``GRADE_VALUES``.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Optional, Union

from .enums import Grade
from .exceptions import InvalidGradeError

GRADE_VALUES: Dict[Grade, int] = {
    Grade.MA: 10,
    Grade.MPA: 7,
    Grade.MANA: 4,
}

MAX_GRADE = GRADE_VALUES[Grade.MA]

_GRADES_BY_VALUE: Dict[int, Grade] = {value: grade for grade, value in GRADE_VALUES.items()}


def value_of(grade: Union[Grade, str]) -> int:
    """Numeric value of a grade or grade symbol."""
    return GRADE_VALUES[Grade.parse(grade)]


def grade_for_value(value: Union[int, float]) -> Grade:
    """Grade whose scale value is exactly ``value``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidGradeError(value)
    if value != int(value) or int(value) not in _GRADES_BY_VALUE:
        raise InvalidGradeError(value)
    return _GRADES_BY_VALUE[int(value)]


def average(values: Iterable[Optional[float]]) -> float:
    """Mean of the present values; absent entries count in neither sum nor size.

    Returns 0 when no value is present.
    """
    total = 0.0
    count = 0
    for value in values:
        if value is None:
            continue
        total += value
        count += 1
    
    if count == 0:
        return 0
    return total / count


def round_half_up(value: float, places: int = 2) -> float:
    """Round on the decimal representation, halves away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
