"""
Class management service: students, classes, enrollments and grades.
"""

import logging
from typing import List, Optional

from ..core.entities import ClassSnapshot, Student, normalize_student_id
from ..core.enums import Grade
from ..core.exceptions import StudentNotFoundError, ValidationError
from ..persistence import ClassRecord, ClassRepository, StudentRepository

logger = logging.getLogger(__name__)


class ClassService:
    """Applies every mutation through the repositories, so the next snapshot sees it.

    Compound mutations hold the class repository's lock, the same one
    ``get_snapshot`` reads under.
    """

    def __init__(self, students: StudentRepository, classes: ClassRepository):
        self._students = students
        self._classes = classes
        self._lock = classes.lock

    # Students

    def register_student(self, cpf: str, name: str, email: Optional[str] = None) -> Student:
        """Register a new student."""
        student_id = normalize_student_id(cpf)
        if not student_id:
            raise ValidationError("Student CPF is required", error_code="MISSING_CPF")
        if not name or not name.strip():
            raise ValidationError("Student name is required", error_code="MISSING_NAME")

        student = self._students.save(Student(student_id=student_id, name=name.strip(), email=email))
        logger.info("Registered student %s", student_id)
        return student

    def update_student(self, cpf: str, name: str, email: Optional[str] = None) -> Student:
        student_id = normalize_student_id(cpf)
        student = self._students.update(Student(student_id=student_id, name=name, email=email))
        logger.info("Updated student %s", student_id)
        return student

    def get_student(self, cpf: str) -> Student:
        student_id = normalize_student_id(cpf)
        student = self._students.find_by_id(student_id)
        if student is None:
            raise StudentNotFoundError(student_id)
        return student

    def list_students(self) -> List[Student]:
        return self._students.find_all()

    def remove_student(self, cpf: str) -> None:
        """Remove a student and drop them from every class they attend."""
        student_id = normalize_student_id(cpf)
        with self._lock:
            if self._students.find_by_id(student_id) is None:
                raise StudentNotFoundError(student_id)
            for record in self._classes.find_all():
                if record.is_enrolled(student_id):
                    record.unenroll(student_id)
            self._students.delete(student_id)
        logger.info("Removed student %s", student_id)

    # Classes

    def create_class(self, topic: str, semester: int, year: int) -> ClassRecord:
        if not topic or not topic.strip():
            raise ValidationError("Class topic is required", error_code="MISSING_TOPIC")
        record = self._classes.create(topic.strip(), semester, year)
        logger.info("Created class %s", record.class_id)
        return record

    def get_class(self, class_id: str) -> ClassRecord:
        return self._classes.get(class_id)

    def get_snapshot(self, class_id: str) -> ClassSnapshot:
        return self._classes.get_snapshot(class_id)

    def list_snapshots(self) -> List[ClassSnapshot]:
        with self._lock:
            return [self._classes.get_snapshot(record.class_id) for record in self._classes.find_all()]

    def delete_class(self, class_id: str) -> None:
        with self._lock:
            self._classes.get(class_id)
            self._classes.delete(class_id)
        logger.info("Deleted class %s", class_id)

    # Enrollments

    def enroll(self, class_id: str, cpf: str) -> None:
        student_id = normalize_student_id(cpf)
        with self._lock:
            record = self._classes.get(class_id)
            if self._students.find_by_id(student_id) is None:
                raise StudentNotFoundError(student_id)
            record.enroll(student_id)
        logger.info("Enrolled student %s in %s", student_id, class_id)

    def unenroll(self, class_id: str, cpf: str) -> None:
        student_id = normalize_student_id(cpf)
        with self._lock:
            self._classes.get(class_id).unenroll(student_id)
        logger.info("Unenrolled student %s from %s", student_id, class_id)

    def set_evaluation(self, class_id: str, cpf: str, goal: str, grade) -> Grade:
        """Record a grade for a goal, replacing any earlier grade for it."""
        student_id = normalize_student_id(cpf)
        if not goal:
            raise ValidationError("Evaluation goal is required", error_code="MISSING_GOAL")
        with self._lock:
            parsed = self._classes.get(class_id).set_evaluation(student_id, goal, grade)
        logger.info("Set %s=%s for student %s in %s", goal, parsed.value, student_id, class_id)
        return parsed
