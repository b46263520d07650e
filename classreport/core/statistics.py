"""
Class statistics and multi-class comparison.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .grading import round_half_up
from .report import Report


@dataclass(frozen=True)
class ClassStatistics:
    """Headline numbers for one class.

    ``mean_grade`` is None when no enrolled student has been graded.
    ``graded`` counts the students that contribute to it.
    """
    mean_grade: Optional[float] = None
    enrolled: int = 0
    graded: int = 0
    approved: int = 0
    failed_by_grade: int = 0
    failed_by_absence: int = 0

    @classmethod
    def from_report(cls, report: Report) -> "ClassStatistics":
        return cls(
            mean_grade=report.students_average,
            enrolled=report.total_enrolled,
            graded=report.total_enrolled - report.pending_count,
            approved=report.approved_count + report.approved_final_count,
            failed_by_grade=report.not_approved_count,
            failed_by_absence=report.failed_by_absence_count,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'meanGrade': self.mean_grade,
            'enrolled': self.enrolled,
            'graded': self.graded,
            'approved': self.approved,
            'failedByGrade': self.failed_by_grade,
            'failedByAbsence': self.failed_by_absence,
        }


def _percentage(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return int(round_half_up(part * 100 / whole, 0))


def approval_rate(statistics: ClassStatistics) -> int:
    """Approved share of enrolled students, as a whole percentage."""
    return _percentage(statistics.approved, statistics.enrolled)


def failure_rate(statistics: ClassStatistics) -> int:
    """Failed share (by grade or absence) of enrolled students, as a whole percentage."""
    return _percentage(statistics.failed_by_grade + statistics.failed_by_absence, statistics.enrolled)


def aggregate_statistics(statistics: Iterable[ClassStatistics]) -> ClassStatistics:
    """Sum counts across classes.

    The mean grade is weighted by graded students; classes without data are
    left out of it, and it stays None when no class has data.
    """
    rows: List[ClassStatistics] = list(statistics)
    with_data = [row for row in rows if row.mean_grade is not None and row.graded > 0]
    graded = sum(row.graded for row in with_data)

    mean_grade = None
    if graded:
        mean_grade = round_half_up(sum(row.mean_grade * row.graded for row in with_data) / graded)

    return ClassStatistics(
        mean_grade=mean_grade,
        enrolled=sum(row.enrolled for row in rows),
        graded=graded,
        approved=sum(row.approved for row in rows),
        failed_by_grade=sum(row.failed_by_grade for row in rows),
        failed_by_absence=sum(row.failed_by_absence for row in rows),
    )
