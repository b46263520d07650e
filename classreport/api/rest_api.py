"""
REST API implementation for the classreport platform using FastAPI.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .. import __version__
from ..core.entities import ClassSnapshot, Student
from ..core.enums import ReportFormat
from ..core.exceptions import (
    ClassReportException, DuplicateEnrollmentError,
    DuplicateEntityError, ResourceNotFoundError, ValidationError
)
from ..services import ClassService, ReportService

logger = logging.getLogger(__name__)


# Pydantic models for API
class StudentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    cpf: str = Field(..., min_length=1, max_length=20)
    email: Optional[str] = Field(None, pattern=r'^[^@]+@[^@]+\.[^@]+$')


class StudentUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = Field(None, pattern=r'^[^@]+@[^@]+\.[^@]+$')


class StudentResponse(BaseModel):
    cpf: str
    name: str
    email: Optional[str] = None


class ClassCreate(BaseModel):
    topic: str = Field(..., min_length=1, max_length=200)
    semester: int = Field(..., ge=1, le=2)
    year: int = Field(..., ge=1900, le=3000)


class EvaluationResponse(BaseModel):
    goal: str
    grade: str


class EnrollmentResponse(BaseModel):
    student: StudentResponse
    evaluations: List[EvaluationResponse] = []


class ClassResponse(BaseModel):
    id: str
    topic: str
    semester: int
    year: int
    enrollments: List[EnrollmentResponse] = []


class EnrollRequest(BaseModel):
    studentCPF: str = Field(..., min_length=1)


class EvaluationUpdate(BaseModel):
    goal: str = Field(..., min_length=1)
    grade: str


class CompareRequest(BaseModel):
    classIds: List[str] = Field(..., min_length=1)


def _error_status(error: ClassReportException) -> int:
    if isinstance(error, ResourceNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, (DuplicateEntityError, DuplicateEnrollmentError)):
        return status.HTTP_409_CONFLICT
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class ClassReportRestAPI:
    """REST API over the class and report services."""

    def __init__(self, class_service: ClassService, report_service: ReportService):
        self._class_service = class_service
        self._report_service = report_service

        # Create FastAPI app
        self.app = FastAPI(
            title="Class Report API",
            description="Classes, enrollments, evaluations and performance reports",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc"
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._setup_error_handlers()
        self._setup_routes()

    def _setup_error_handlers(self):
        @self.app.exception_handler(ClassReportException)
        async def handle_class_report_error(request: Request, exc: ClassReportException):
            status_code = _error_status(exc)
            if status_code >= 500:
                logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
            return JSONResponse(status_code=status_code, content={"error": exc.message})

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/health", response_model=Dict[str, str])
        async def health_check():
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        # Student endpoints
        @self.app.post("/api/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
        async def create_student(student_data: StudentCreate):
            student = self._class_service.register_student(
                student_data.cpf, student_data.name, student_data.email
            )
            return self._student_to_response(student)

        @self.app.get("/api/students", response_model=List[StudentResponse])
        async def list_students():
            return [self._student_to_response(student) for student in self._class_service.list_students()]

        @self.app.get("/api/students/{cpf}", response_model=StudentResponse)
        async def get_student(cpf: str):
            return self._student_to_response(self._class_service.get_student(cpf))

        @self.app.put("/api/students/{cpf}", response_model=StudentResponse)
        async def update_student(cpf: str, student_data: StudentUpdate):
            student = self._class_service.update_student(cpf, student_data.name, student_data.email)
            return self._student_to_response(student)

        @self.app.delete("/api/students/{cpf}", status_code=status.HTTP_204_NO_CONTENT)
        async def delete_student(cpf: str):
            self._class_service.remove_student(cpf)

        # Class endpoints
        @self.app.post("/api/classes", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
        async def create_class(class_data: ClassCreate):
            record = self._class_service.create_class(class_data.topic, class_data.semester, class_data.year)
            return self._class_to_response(self._class_service.get_snapshot(record.class_id))

        @self.app.get("/api/classes", response_model=List[ClassResponse])
        async def list_classes():
            return [self._class_to_response(snapshot) for snapshot in self._class_service.list_snapshots()]

        @self.app.post("/api/classes/compare")
        async def compare_classes(compare_data: CompareRequest):
            return self._report_service.compare_classes(compare_data.classIds)

        @self.app.get("/api/classes/{class_id}", response_model=ClassResponse)
        async def get_class(class_id: str):
            return self._class_to_response(self._class_service.get_snapshot(class_id))

        @self.app.delete("/api/classes/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
        async def delete_class(class_id: str):
            self._class_service.delete_class(class_id)

        # Enrollment endpoints
        @self.app.post("/api/classes/{class_id}/enroll", response_model=ClassResponse,
                       status_code=status.HTTP_201_CREATED)
        async def enroll_student(class_id: str, enroll_data: EnrollRequest):
            self._class_service.enroll(class_id, enroll_data.studentCPF)
            return self._class_to_response(self._class_service.get_snapshot(class_id))

        @self.app.delete("/api/classes/{class_id}/enroll/{cpf}", status_code=status.HTTP_204_NO_CONTENT)
        async def unenroll_student(class_id: str, cpf: str):
            self._class_service.unenroll(class_id, cpf)

        @self.app.put("/api/classes/{class_id}/enrollments/{cpf}/evaluation", response_model=EvaluationResponse)
        async def set_evaluation(class_id: str, cpf: str, evaluation: EvaluationUpdate):
            grade = self._class_service.set_evaluation(class_id, cpf, evaluation.goal, evaluation.grade)
            return EvaluationResponse(goal=evaluation.goal, grade=grade.value)

        # Report endpoints
        @self.app.get("/api/classes/{class_id}/report")
        async def get_report(class_id: str, format: str = "json"):
            report_format = self._parse_format(format)
            report = self._report_service.generate_report(class_id)
            if report_format == ReportFormat.CSV:
                return PlainTextResponse(report.render(ReportFormat.CSV), media_type="text/csv")
            return JSONResponse(content=report.to_dict())

        @self.app.get("/api/classes/{class_id}/statistics")
        async def get_statistics(class_id: str) -> Dict[str, Any]:
            return self._report_service.class_statistics(class_id).to_dict()

    @staticmethod
    def _parse_format(value: str) -> ReportFormat:
        try:
            return ReportFormat(value.lower())
        except ValueError:
            raise ValidationError(f"Unsupported report format: {value}", error_code="UNSUPPORTED_FORMAT")

    def _student_to_response(self, student: Student) -> StudentResponse:
        """Convert Student entity to response model."""
        return StudentResponse(cpf=student.student_id, name=student.name, email=student.email)

    def _class_to_response(self, snapshot: ClassSnapshot) -> ClassResponse:
        """Convert a class snapshot to response model."""
        snapshot.check_roster()
        enrollments = []
        for enrollment in snapshot.enrollments:
            enrollments.append(EnrollmentResponse(
                student=self._student_to_response(snapshot.resolve_student(enrollment.student_id)),
                evaluations=[
                    EvaluationResponse(goal=evaluation.goal, grade=evaluation.grade.value)
                    for evaluation in enrollment.evaluations
                ],
            ))
        return ClassResponse(
            id=snapshot.class_id,
            topic=snapshot.topic,
            semester=snapshot.semester,
            year=snapshot.year,
            enrollments=enrollments,
        )
