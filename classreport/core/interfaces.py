"""
Core interfaces and abstract base classes for the classreport platform.
"""

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

from .enums import ReportFormat, StudentStatus

if TYPE_CHECKING:
    from .entities import ClassSnapshot, Enrollment


class Reportable(ABC):
    """Interface for values that can be rendered as a report document."""

    @abstractmethod
    def render(self, format: ReportFormat = ReportFormat.JSON) -> str:
        """Render the report in the given format."""
        pass


class StatusRule(ABC):
    """Abstract base class for status classification rules."""

    @abstractmethod
    def classify(self, enrollment: 'Enrollment', average: Optional[float]) -> Optional[StudentStatus]:
        """Return a status, or None to defer to the next rule."""
        pass

    @abstractmethod
    def get_rule_name(self) -> str:
        """Get the name of this rule."""
        pass


class SnapshotProvider(ABC):
    """Source of fully materialized class snapshots."""

    @abstractmethod
    def get_snapshot(self, class_id: str) -> 'ClassSnapshot':
        """Return the current snapshot, raising ClassNotFoundError if unknown."""
        pass
