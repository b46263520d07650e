"""
Core module containing the grading model and the report engine.
"""

from .entities import *
from .interfaces import *
from .exceptions import *
from .enums import *
from .grading import GRADE_VALUES, MAX_GRADE, average, grade_for_value, round_half_up, value_of
from .performance import GoalPerformance, aggregate_goal_performance
from .report import Report, ReportGenerator, StudentEntry
from .statistics import ClassStatistics, aggregate_statistics, approval_rate, failure_rate
from .status import (
    APPROVAL_THRESHOLD, AbsenceRule, AverageThresholdRule, FinalExamRule,
    PendingRule, StatusClassifier
)

__all__ = [
    # Entities
    "Student",
    "EvaluationRecord",
    "Enrollment",
    "ClassSnapshot",
    "class_id_for",
    "normalize_student_id",

    # Interfaces
    "Reportable",
    "StatusRule",
    "SnapshotProvider",

    # Enums
    "Grade",
    "StudentStatus",
    "ReportFormat",

    # Grading
    "GRADE_VALUES",
    "MAX_GRADE",
    "average",
    "grade_for_value",
    "round_half_up",
    "value_of",

    # Engine
    "APPROVAL_THRESHOLD",
    "PendingRule",
    "FinalExamRule",
    "AbsenceRule",
    "AverageThresholdRule",
    "StatusClassifier",
    "GoalPerformance",
    "aggregate_goal_performance",
    "StudentEntry",
    "Report",
    "ReportGenerator",
    "ClassStatistics",
    "aggregate_statistics",
    "approval_rate",
    "failure_rate",

    # Exceptions
    "ClassReportException",
    "ValidationError",
    "InvalidGradeError",
    "DuplicateEntityError",
    "DuplicateEnrollmentError",
    "DataIntegrityError",
    "ResourceNotFoundError",
    "ClassNotFoundError",
    "StudentNotFoundError",
    "EnrollmentNotFoundError",
    "ClassificationError",
    "PersistenceError",
    "ConfigurationError",
]
