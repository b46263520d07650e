"""
Custom exceptions for the classreport platform.
"""

from typing import Optional, Any, Dict


class ClassReportException(Exception):
    """Base exception for all classreport errors."""
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(ClassReportException):
    """Raised when data validation fails."""
    pass


class InvalidGradeError(ValidationError):
    """Raised when a grade symbol or value is not on the grade scale."""
    
    def __init__(self, grade: Any):
        super().__init__(
            f"Invalid grade: {grade!r} (expected one of MA, MPA, MANA)",
            error_code="INVALID_GRADE",
            details={"grade": grade}
        )
        self.grade = grade


class DuplicateEntityError(ClassReportException):
    """Raised when attempting to create a duplicate entity."""
    pass


class DuplicateEnrollmentError(ClassReportException):
    """Raised when a student is enrolled twice in the same class."""
    
    def __init__(self, student_id: str, class_id: Optional[str] = None):
        message = f"Student {student_id} is already enrolled in this class"
        if class_id:
            message = f"Student {student_id} is already enrolled in class {class_id}"
        super().__init__(
            message,
            error_code="DUPLICATE_ENROLLMENT",
            details={"student_id": student_id, "class_id": class_id}
        )
        self.student_id = student_id
        self.class_id = class_id


class DataIntegrityError(ClassReportException):
    """Raised when a snapshot references data that cannot be resolved."""
    pass


class ResourceNotFoundError(ClassReportException):
    """Raised when a requested resource is not found."""
    pass


class ClassNotFoundError(ResourceNotFoundError):
    """Raised when a class identity is unknown."""
    
    def __init__(self, class_id: str):
        super().__init__(
            f"Class not found: {class_id}",
            error_code="CLASS_NOT_FOUND",
            details={"class_id": class_id}
        )
        self.class_id = class_id


class StudentNotFoundError(ResourceNotFoundError):
    """Raised when a student identity is unknown."""
    
    def __init__(self, student_id: str):
        super().__init__(
            f"Student not found: {student_id}",
            error_code="STUDENT_NOT_FOUND",
            details={"student_id": student_id}
        )
        self.student_id = student_id


class EnrollmentNotFoundError(ResourceNotFoundError):
    """Raised when a student is not enrolled in the given class."""
    
    def __init__(self, student_id: str, class_id: str):
        super().__init__(
            f"Student {student_id} is not enrolled in class {class_id}",
            error_code="ENROLLMENT_NOT_FOUND",
            details={"student_id": student_id, "class_id": class_id}
        )
        self.student_id = student_id
        self.class_id = class_id


class ClassificationError(ClassReportException):
    """Raised when no status rule produces a classification."""
    pass


class PersistenceError(ClassReportException):
    """Raised when persistence operations fail."""
    pass


class ConfigurationError(ClassReportException):
    """Raised when configuration is invalid."""
    pass
