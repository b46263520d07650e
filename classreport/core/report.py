"""
Class performance report and the generator that builds it.
"""

import csv
import io
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from .entities import ClassSnapshot
from .enums import ReportFormat, StudentStatus
from .exceptions import ValidationError
from .grading import average, round_half_up
from .interfaces import Reportable
from .performance import GoalPerformance, aggregate_goal_performance
from .status import StatusClassifier

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("studentId", "name", "finalGrade", "status")


@dataclass(frozen=True)
class StudentEntry:
    """One row of the report's student table."""
    student_id: str
    name: str
    final_grade: Optional[float]
    status: StudentStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            'studentId': self.student_id,
            'name': self.name,
            'finalGrade': self.final_grade,
            'status': self.status.value,
        }


@dataclass(frozen=True)
class Report(Reportable):
    """Read-only summary of a class's performance at one instant."""
    class_id: str
    topic: str
    semester: int
    year: int
    total_enrolled: int
    students_average: Optional[float]
    approved_count: int
    approved_final_count: int
    not_approved_count: int
    failed_by_absence_count: int
    pending_count: int
    evaluation_performance: Tuple[GoalPerformance, ...]
    students: Tuple[StudentEntry, ...]
    generated_at: datetime

    def status_counts(self) -> Dict[StudentStatus, int]:
        return {
            StudentStatus.APPROVED: self.approved_count,
            StudentStatus.APPROVED_FINAL: self.approved_final_count,
            StudentStatus.FAILED: self.not_approved_count,
            StudentStatus.FAILED_BY_ABSENCE: self.failed_by_absence_count,
            StudentStatus.PENDING: self.pending_count,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the stable camelCase field set."""
        return {
            'classId': self.class_id,
            'topic': self.topic,
            'semester': self.semester,
            'year': self.year,
            'totalEnrolled': self.total_enrolled,
            'studentsAverage': self.students_average,
            'approvedCount': self.approved_count,
            'approvedFinalCount': self.approved_final_count,
            'notApprovedCount': self.not_approved_count,
            'failedByAbsenceCount': self.failed_by_absence_count,
            'pendingCount': self.pending_count,
            'evaluationPerformance': [goal.to_dict() for goal in self.evaluation_performance],
            'students': [student.to_dict() for student in self.students],
            'generatedAt': self.generated_at.isoformat(),
        }

    def render(self, format: ReportFormat = ReportFormat.JSON) -> str:
        if format == ReportFormat.JSON:
            return json.dumps(self.to_dict(), allow_nan=False)
        if format == ReportFormat.CSV:
            buffer = io.StringIO()
            writer = csv.writer(buffer, lineterminator="\n")
            writer.writerow(CSV_COLUMNS)
            for student in self.students:
                row = student.to_dict()
                writer.writerow([
                    row['studentId'],
                    row['name'],
                    "" if row['finalGrade'] is None else row['finalGrade'],
                    row['status'],
                ])
            return buffer.getvalue()
        raise ValidationError(f"Unsupported report format: {format}", error_code="UNSUPPORTED_FORMAT")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReportGenerator:
    """Turns a class snapshot into a Report.

    The generator keeps no state between calls and never mutates the snapshot,
    so two calls on the same snapshot differ only in ``generated_at``.
    """

    def __init__(self, classifier: Optional[StatusClassifier] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self._classifier = classifier or StatusClassifier()
        self._clock = clock or _utcnow

    def generate(self, snapshot: ClassSnapshot) -> Report:
        snapshot.check_roster()

        counts = {status: 0 for status in StudentStatus}
        students: List[StudentEntry] = []
        student_averages: List[Optional[float]] = []

        for enrollment in snapshot.enrollments:
            student = snapshot.resolve_student(enrollment.student_id)
            student_average = self._classifier.student_average(enrollment)
            status = self._classifier.classify(enrollment)
            counts[status] += 1
            student_averages.append(student_average)
            students.append(StudentEntry(
                student_id=enrollment.student_id,
                name=student.name,
                final_grade=None if student_average is None else round_half_up(student_average),
                status=status,
            ))

        if any(value is not None for value in student_averages):
            students_average = round_half_up(average(student_averages))
        else:
            students_average = None

        report = Report(
            class_id=snapshot.class_id,
            topic=snapshot.topic,
            semester=snapshot.semester,
            year=snapshot.year,
            total_enrolled=len(snapshot.enrollments),
            students_average=students_average,
            approved_count=counts[StudentStatus.APPROVED],
            approved_final_count=counts[StudentStatus.APPROVED_FINAL],
            not_approved_count=counts[StudentStatus.FAILED],
            failed_by_absence_count=counts[StudentStatus.FAILED_BY_ABSENCE],
            pending_count=counts[StudentStatus.PENDING],
            evaluation_performance=tuple(aggregate_goal_performance(snapshot.enrollments)),
            students=tuple(students),
            generated_at=self._clock(),
        )
        logger.debug("Generated report for %s: %d enrolled", report.class_id, report.total_enrolled)
        return report
