"""Shared fixtures for the classreport test suite."""

from datetime import datetime, timezone

import pytest

from classreport.core import (
    ClassSnapshot, Enrollment, EvaluationRecord, Grade, ReportGenerator, Student
)
from classreport.persistence import ClassRepository, StudentRepository
from classreport.services import ClassService, ReportService

GOALS = ("Requirements", "Design", "Tests")

FIXED_TIME = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_enrollment():
    """Build an enrollment grading GOALS in order with the given symbols."""
    def _make(student_id, *symbols, goals=GOALS):
        records = [EvaluationRecord(goal=goal, grade=Grade(symbol)) for goal, symbol in zip(goals, symbols)]
        return Enrollment.create(student_id, records)
    return _make


@pytest.fixture
def make_snapshot():
    """Build a snapshot whose roster names every enrolled student."""
    def _make(enrollments=(), topic="ESS", year=2025, semester=1, names=None):
        names = names or {}
        roster = {
            e.student_id: Student(student_id=e.student_id, name=names.get(e.student_id, f"Student {e.student_id}"))
            for e in enrollments
        }
        return ClassSnapshot(topic=topic, year=year, semester=semester,
                             enrollments=tuple(enrollments), roster=roster)
    return _make


@pytest.fixture
def fixed_time():
    return FIXED_TIME


@pytest.fixture
def generator():
    return ReportGenerator(clock=lambda: FIXED_TIME)


@pytest.fixture
def abc_snapshot(make_enrollment, make_snapshot):
    """Alice all MA, Bob all MPA, Charlie all MANA."""
    return make_snapshot(
        [
            make_enrollment("111", "MA", "MA", "MA"),
            make_enrollment("222", "MPA", "MPA", "MPA"),
            make_enrollment("333", "MANA", "MANA", "MANA"),
        ],
        names={"111": "Alice", "222": "Bob", "333": "Charlie"},
    )


@pytest.fixture
def students():
    return StudentRepository()


@pytest.fixture
def classes(students):
    return ClassRepository(students)


@pytest.fixture
def class_service(students, classes):
    return ClassService(students, classes)


@pytest.fixture
def report_service(classes):
    return ReportService(classes, ReportGenerator(clock=lambda: FIXED_TIME))
