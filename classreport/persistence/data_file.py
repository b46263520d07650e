"""
JSON file persistence for students and classes.

File layout::

    {
      "students": [{"cpf": "...", "name": "...", "email": "..."}],
      "classes": [
        {"id": "...", "topic": "...", "semester": 1, "year": 2025,
         "enrollments": [{"student": {"cpf": "..."},
                          "evaluations": [{"goal": "...", "grade": "MA"}]}]}
      ]
    }
"""

import json
import logging
import os
from typing import Any, Dict

from ..core.entities import Student, normalize_student_id
from ..core.exceptions import DataIntegrityError, PersistenceError
from .repositories import ClassRecord, ClassRepository, StudentRepository

logger = logging.getLogger(__name__)


class JsonDataFile:
    """Loads and saves repository contents as a single JSON document."""

    def __init__(self, path: str):
        self._path = path

    def exists(self) -> bool:
        return os.path.exists(self._path)

    def load(self, students: StudentRepository, classes: ClassRepository) -> None:
        """Populate the repositories from the file."""
        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to read data file {self._path}: {str(e)}")

        for student_data in data.get('students', []):
            students.save(Student.from_dict(student_data))

        for class_data in data.get('classes', []):
            self._load_class(class_data, students, classes)

        logger.info("Loaded %d students and %d classes from %s",
                    len(data.get('students', [])), len(data.get('classes', [])), self._path)

    def save(self, students: StudentRepository, classes: ClassRepository) -> None:
        """Write the repositories to the file."""
        document = {
            'students': [student.to_dict() for student in students.find_all()],
            'classes': [self._class_to_dict(record) for record in classes.find_all()],
        }
        try:
            with open(self._path, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
        except OSError as e:
            raise PersistenceError(f"Failed to write data file {self._path}: {str(e)}")
        logger.info("Saved %d students and %d classes to %s",
                    len(document['students']), len(document['classes']), self._path)

    def _load_class(self, class_data: Dict[str, Any], students: StudentRepository,
                    classes: ClassRepository) -> None:
        enrollments = class_data.get('enrollments', [])
        for enrollment_data in enrollments:
            student_id = normalize_student_id(enrollment_data['student']['cpf'])
            if students.find_by_id(student_id) is None:
                raise DataIntegrityError(
                    f"Student with CPF {student_id} not found",
                    error_code="UNRESOLVED_STUDENT",
                    details={"class_id": class_data.get('id'), "student_id": student_id}
                )

        record = classes.create(class_data['topic'], int(class_data['semester']), int(class_data['year']))
        for enrollment_data in enrollments:
            student_id = normalize_student_id(enrollment_data['student']['cpf'])
            record.enroll(student_id)
            for evaluation in enrollment_data.get('evaluations', []):
                record.set_evaluation(student_id, evaluation['goal'], evaluation['grade'])

    @staticmethod
    def _class_to_dict(record: ClassRecord) -> Dict[str, Any]:
        return {
            'id': record.class_id,
            'topic': record.topic,
            'semester': record.semester,
            'year': record.year,
            'enrollments': [enrollment.to_dict() for enrollment in record.enrollments()],
        }
