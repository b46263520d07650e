"""
Enumerations and constants for the classreport platform.
"""

from enum import Enum
from typing import Union

from .exceptions import InvalidGradeError


class Grade(Enum):
    """Mastery level recorded for one goal."""
    MA = "MA"      # mastered
    MPA = "MPA"    # partially mastered
    MANA = "MANA"  # not mastered
    
    @classmethod
    def parse(cls, symbol: Union[str, "Grade"]) -> "Grade":
        """Return the grade for an exact symbol, never coercing."""
        if isinstance(symbol, cls):
            return symbol
        if isinstance(symbol, str):
            try:
                return cls(symbol)
            except ValueError:
                pass
        raise InvalidGradeError(symbol)


class StudentStatus(Enum):
    """Outcome of classifying one enrollment."""
    APPROVED = "APPROVED"
    APPROVED_FINAL = "APPROVED_FINAL"
    FAILED = "FAILED"
    FAILED_BY_ABSENCE = "FAILED_BY_ABSENCE"
    PENDING = "PENDING"


class ReportFormat(Enum):
    """Supported report formats."""
    JSON = "json"
    CSV = "csv"
