"""
Student status classification.

Status is never stored. Every call walks the rule chain from scratch and the
first rule that returns a status wins.
"""

import logging
from typing import List, Optional, Sequence

from .entities import Enrollment
from .enums import StudentStatus
from .exceptions import ClassificationError
from .grading import average
from .interfaces import StatusRule

logger = logging.getLogger(__name__)

APPROVAL_THRESHOLD = 7.0


class PendingRule(StatusRule):
    """Enrollments with no recorded evaluation are pending."""

    def classify(self, enrollment: Enrollment, average: Optional[float]) -> Optional[StudentStatus]:
        if not enrollment.has_evaluations:
            return StudentStatus.PENDING
        return None

    def get_rule_name(self) -> str:
        return "PendingRule"


class FinalExamRule(StatusRule):
    """Extension point for approval through a make-up exam.

    Make-up exam results are not recorded anywhere yet, so the guard can never
    hold and the rule always defers.
    """

    def classify(self, enrollment: Enrollment, average: Optional[float]) -> Optional[StudentStatus]:
        # TODO: return APPROVED_FINAL once enrollments carry a make-up exam grade.
        return None

    def get_rule_name(self) -> str:
        return "FinalExamRule"


class AbsenceRule(StatusRule):
    """Extension point for failure by absence.

    Attendance is not recorded anywhere yet, so the guard can never hold and
    the rule always defers.
    """

    def classify(self, enrollment: Enrollment, average: Optional[float]) -> Optional[StudentStatus]:
        # TODO: return FAILED_BY_ABSENCE once enrollments carry attendance.
        return None

    def get_rule_name(self) -> str:
        return "AbsenceRule"


class AverageThresholdRule(StatusRule):
    """Approve at or above the threshold, fail below it."""

    def __init__(self, threshold: float = APPROVAL_THRESHOLD):
        self._threshold = threshold

    @property
    def threshold(self) -> float:
        return self._threshold

    def classify(self, enrollment: Enrollment, average: Optional[float]) -> Optional[StudentStatus]:
        if average is None:
            return None
        if average >= self._threshold:
            return StudentStatus.APPROVED
        return StudentStatus.FAILED

    def get_rule_name(self) -> str:
        return "AverageThresholdRule"


def default_rules() -> List[StatusRule]:
    return [PendingRule(), FinalExamRule(), AbsenceRule(), AverageThresholdRule()]


class StatusClassifier:
    """Derives a student's status from their evaluations."""

    def __init__(self, rules: Optional[Sequence[StatusRule]] = None):
        self._rules: List[StatusRule] = list(rules) if rules is not None else default_rules()

    @property
    def rules(self) -> List[StatusRule]:
        return list(self._rules)

    def student_average(self, enrollment: Enrollment) -> Optional[float]:
        """Mean grade value of the enrollment, or None when nothing is graded."""
        if not enrollment.has_evaluations:
            return None
        return average(enrollment.grade_values())

    def classify(self, enrollment: Enrollment) -> StudentStatus:
        student_average = self.student_average(enrollment)
        for rule in self._rules:
            status = rule.classify(enrollment, student_average)
            if status is not None:
                logger.debug("Student %s classified %s by %s",
                             enrollment.student_id, status.value, rule.get_rule_name())
                return status
        raise ClassificationError(
            f"No status rule matched student {enrollment.student_id}",
            error_code="UNCLASSIFIED",
            details={"student_id": enrollment.student_id,
                     "rules": [rule.get_rule_name() for rule in self._rules]}
        )
