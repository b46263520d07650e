"""
Repository implementations for students and classes.

The class aggregate is mutable and lives only here. Readers never see it:
``ClassRepository.get_snapshot`` materializes a fresh immutable snapshot on
every call.
"""

import threading
from typing import Dict, List, Optional

from ..core.entities import (
    ClassSnapshot, Enrollment, EvaluationRecord, Student, class_id_for
)
from ..core.enums import Grade
from ..core.exceptions import (
    ClassNotFoundError, DuplicateEnrollmentError, DuplicateEntityError,
    EnrollmentNotFoundError, StudentNotFoundError
)
from ..core.interfaces import SnapshotProvider


class StudentRepository:
    """Registered students keyed by their identity."""

    def __init__(self):
        self._students: Dict[str, Student] = {}
        self._lock = threading.RLock()

    def save(self, student: Student) -> Student:
        """Register a new student."""
        with self._lock:
            if student.student_id in self._students:
                raise DuplicateEntityError(
                    f"Student with CPF {student.student_id} already exists",
                    error_code="DUPLICATE_STUDENT",
                    details={"student_id": student.student_id}
                )
            self._students[student.student_id] = student
            return student

    def update(self, student: Student) -> Student:
        """Replace an existing student."""
        with self._lock:
            if student.student_id not in self._students:
                raise StudentNotFoundError(student.student_id)
            self._students[student.student_id] = student
            return student

    def find_by_id(self, student_id: str) -> Optional[Student]:
        with self._lock:
            return self._students.get(student_id)

    def find_all(self) -> List[Student]:
        with self._lock:
            return list(self._students.values())

    def delete(self, student_id: str) -> bool:
        with self._lock:
            return self._students.pop(student_id, None) is not None


class ClassRecord:
    """Mutable class aggregate: identity plus ordered enrollments."""

    def __init__(self, topic: str, semester: int, year: int):
        self.topic = topic
        self.semester = semester
        self.year = year
        # student id -> goal -> grade, in enrollment order
        self._enrollments: Dict[str, Dict[str, Grade]] = {}

    @property
    def class_id(self) -> str:
        return class_id_for(self.topic, self.year, self.semester)

    def is_enrolled(self, student_id: str) -> bool:
        return student_id in self._enrollments

    def enroll(self, student_id: str) -> None:
        if student_id in self._enrollments:
            raise DuplicateEnrollmentError(student_id, self.class_id)
        self._enrollments[student_id] = {}

    def unenroll(self, student_id: str) -> None:
        if student_id not in self._enrollments:
            raise EnrollmentNotFoundError(student_id, self.class_id)
        del self._enrollments[student_id]

    def set_evaluation(self, student_id: str, goal: str, grade) -> Grade:
        """Record or overwrite the grade for one goal."""
        parsed = Grade.parse(grade)
        if student_id not in self._enrollments:
            raise EnrollmentNotFoundError(student_id, self.class_id)
        self._enrollments[student_id][goal] = parsed
        return parsed

    def enrollment(self, student_id: str) -> Enrollment:
        if student_id not in self._enrollments:
            raise EnrollmentNotFoundError(student_id, self.class_id)
        goals = self._enrollments[student_id]
        return Enrollment.create(
            student_id,
            [EvaluationRecord(goal=goal, grade=grade) for goal, grade in goals.items()]
        )

    def enrollments(self) -> List[Enrollment]:
        return [self.enrollment(student_id) for student_id in self._enrollments]


class ClassRepository(SnapshotProvider):
    """Classes keyed by their derived identity."""

    def __init__(self, student_repository: StudentRepository):
        self._student_repository = student_repository
        self._classes: Dict[str, ClassRecord] = {}
        self._lock = threading.RLock()

    def create(self, topic: str, semester: int, year: int) -> ClassRecord:
        with self._lock:
            record = ClassRecord(topic, semester, year)
            if record.class_id in self._classes:
                raise DuplicateEntityError(
                    f"Class {record.class_id} already exists",
                    error_code="DUPLICATE_CLASS",
                    details={"class_id": record.class_id}
                )
            self._classes[record.class_id] = record
            return record

    def find_by_id(self, class_id: str) -> Optional[ClassRecord]:
        with self._lock:
            return self._classes.get(class_id)

    def get(self, class_id: str) -> ClassRecord:
        with self._lock:
            record = self._classes.get(class_id)
            if record is None:
                raise ClassNotFoundError(class_id)
            return record

    def find_all(self) -> List[ClassRecord]:
        with self._lock:
            return list(self._classes.values())

    def delete(self, class_id: str) -> bool:
        with self._lock:
            return self._classes.pop(class_id, None) is not None

    @property
    def lock(self) -> threading.RLock:
        """Guards the classes and every record they hold."""
        return self._lock

    def get_snapshot(self, class_id: str) -> ClassSnapshot:
        """Materialize the current state of a class.

        Enrolled students missing from the student repository are left out of
        the roster; the report engine treats that as a data-integrity fault.
        """
        with self._lock:
            record = self.get(class_id)
            enrollments = tuple(record.enrollments())
            roster = {}
            for enrollment in enrollments:
                student = self._student_repository.find_by_id(enrollment.student_id)
                if student is not None:
                    roster[student.student_id] = student
            return ClassSnapshot(
                topic=record.topic,
                year=record.year,
                semester=record.semester,
                enrollments=enrollments,
                roster=roster,
            )
