"""
Core entities for the classreport platform.

These are immutable values handed to the report engine. The mutable class
aggregate lives in the persistence layer and produces them on demand.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .enums import Grade
from .exceptions import DataIntegrityError, DuplicateEnrollmentError
from .grading import value_of


def normalize_student_id(raw: str) -> str:
    """Strip the usual national-id separators so ids key consistently."""
    return raw.replace(".", "").replace("-", "").strip()


def class_id_for(topic: str, year: int, semester: int) -> str:
    """Deterministic class identity."""
    return f"{topic}-{year}-{semester}"


@dataclass(frozen=True)
class Student:
    """A student registered in the system."""
    student_id: str
    name: str
    email: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert student to dictionary."""
        return {
            'cpf': self.student_id,
            'name': self.name,
            'email': self.email,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Student":
        return cls(
            student_id=normalize_student_id(data['cpf']),
            name=data['name'],
            email=data.get('email'),
        )


@dataclass(frozen=True)
class EvaluationRecord:
    """One graded goal for one enrollment."""
    goal: str
    grade: Grade

    @property
    def value(self) -> int:
        return value_of(self.grade)

    def to_dict(self) -> Dict[str, Any]:
        return {'goal': self.goal, 'grade': self.grade.value}


@dataclass(frozen=True)
class Enrollment:
    """One student's participation in one class."""
    student_id: str
    evaluations: Tuple[EvaluationRecord, ...] = ()

    @classmethod
    def create(cls, student_id: str, evaluations: Iterable[EvaluationRecord] = ()) -> "Enrollment":
        """Build an enrollment keeping one record per goal.

        A later record for a goal replaces the earlier one in place.
        """
        by_goal: Dict[str, EvaluationRecord] = {}
        for record in evaluations:
            by_goal[record.goal] = record
        return cls(student_id=student_id, evaluations=tuple(by_goal.values()))

    @property
    def has_evaluations(self) -> bool:
        return len(self.evaluations) > 0

    def goals(self) -> List[str]:
        return [record.goal for record in self.evaluations]

    def grade_for(self, goal: str) -> Optional[Grade]:
        for record in self.evaluations:
            if record.goal == goal:
                return record.grade
        return None

    def grade_values(self) -> List[int]:
        return [record.value for record in self.evaluations]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'student': {'cpf': self.student_id},
            'evaluations': [record.to_dict() for record in self.evaluations],
        }


@dataclass(frozen=True)
class ClassSnapshot:
    """Point-in-time state of a class, as handed to the report engine."""
    topic: str
    year: int
    semester: int
    enrollments: Tuple[Enrollment, ...] = ()
    roster: Mapping[str, Student] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'roster', MappingProxyType(dict(self.roster)))
        seen = set()
        for enrollment in self.enrollments:
            if enrollment.student_id in seen:
                raise DuplicateEnrollmentError(enrollment.student_id, self.class_id)
            seen.add(enrollment.student_id)

    @property
    def class_id(self) -> str:
        return class_id_for(self.topic, self.year, self.semester)

    def resolve_student(self, student_id: str) -> Optional[Student]:
        return self.roster.get(student_id)

    def check_roster(self) -> None:
        """Raise DataIntegrityError if an enrolled student is missing from the roster."""
        missing = [enrollment.student_id for enrollment in self.enrollments
                   if enrollment.student_id not in self.roster]
        if missing:
            raise DataIntegrityError(
                f"Class {self.class_id} has enrollments for unknown students: {', '.join(missing)}",
                error_code="UNRESOLVED_STUDENT",
                details={"class_id": self.class_id, "student_ids": missing}
            )
