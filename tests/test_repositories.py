"""Tests for the repositories, the JSON data file and the services over them."""

import json
import threading

import pytest

from classreport.core import (
    ClassNotFoundError, DataIntegrityError, DuplicateEnrollmentError,
    DuplicateEntityError, EnrollmentNotFoundError, Grade, InvalidGradeError,
    StudentNotFoundError, ValidationError
)
from classreport.persistence import ClassRepository, JsonDataFile, StudentRepository


@pytest.fixture
def ess(class_service):
    """ESS 2025/1 with Alice, Bob and Charlie enrolled and ungraded."""
    record = class_service.create_class("ESS", 1, 2025)
    for cpf, name in [("111.111.111-11", "Alice"), ("22222222222", "Bob"), ("33333333333", "Charlie")]:
        class_service.register_student(cpf, name)
        class_service.enroll(record.class_id, cpf)
    return record.class_id


class TestClassService:

    def test_class_identity_is_derived(self, class_service):
        record = class_service.create_class("ESS", 1, 2025)
        assert record.class_id == "ESS-2025-1"
        with pytest.raises(DuplicateEntityError):
            class_service.create_class("ESS", 1, 2025)

    def test_student_id_is_normalized(self, class_service, ess):
        assert class_service.get_student("11111111111").name == "Alice"
        assert class_service.get_student("111.111.111-11").name == "Alice"

    def test_duplicate_student(self, class_service, ess):
        with pytest.raises(DuplicateEntityError):
            class_service.register_student("111.111.111-11", "Someone Else")

    def test_duplicate_enrollment(self, class_service, ess):
        with pytest.raises(DuplicateEnrollmentError):
            class_service.enroll(ess, "22222222222")

    def test_enroll_unknown_student_or_class(self, class_service, ess):
        with pytest.raises(StudentNotFoundError):
            class_service.enroll(ess, "99999999999")
        with pytest.raises(ClassNotFoundError):
            class_service.enroll("Nope-2025-1", "22222222222")

    def test_invalid_grade_is_rejected(self, class_service, ess):
        with pytest.raises(InvalidGradeError):
            class_service.set_evaluation(ess, "22222222222", "Design", "A+")
        assert class_service.get_class(ess).enrollment("22222222222").evaluations == ()

    def test_grade_for_unenrolled_student(self, class_service, ess):
        with pytest.raises(EnrollmentNotFoundError):
            class_service.set_evaluation(ess, "99999999999", "Design", "MA")

    def test_missing_goal(self, class_service, ess):
        with pytest.raises(ValidationError):
            class_service.set_evaluation(ess, "22222222222", "", "MA")

    def test_setting_a_goal_twice_replaces_it(self, class_service, ess):
        class_service.set_evaluation(ess, "22222222222", "Design", "MANA")
        class_service.set_evaluation(ess, "22222222222", "Tests", "MPA")
        class_service.set_evaluation(ess, "22222222222", "Design", "MA")

        enrollment = class_service.get_class(ess).enrollment("22222222222")
        assert enrollment.goals() == ["Design", "Tests"]
        assert enrollment.grade_for("Design") == Grade.MA

    def test_remove_student_unenrolls_everywhere(self, class_service, ess):
        other = class_service.create_class("ESS", 2, 2025).class_id
        class_service.enroll(other, "22222222222")

        class_service.remove_student("22222222222")

        assert not class_service.get_class(ess).is_enrolled("22222222222")
        assert not class_service.get_class(other).is_enrolled("22222222222")
        with pytest.raises(StudentNotFoundError):
            class_service.get_student("22222222222")

    def test_unenroll_unknown(self, class_service, ess):
        with pytest.raises(EnrollmentNotFoundError):
            class_service.unenroll(ess, "99999999999")

    def test_mutations_wait_for_snapshot_lock(self, class_service, classes, ess):
        class_service.register_student("44444444444", "Dana")
        worker = threading.Thread(target=class_service.enroll, args=(ess, "44444444444"))
        with classes.lock:
            worker.start()
            worker.join(timeout=0.2)
            assert worker.is_alive()
            assert not classes.get(ess).is_enrolled("44444444444")
        worker.join()

        assert classes.get(ess).is_enrolled("44444444444")


class TestReportService:

    def test_read_after_enroll_and_unenroll(self, class_service, report_service, ess):
        before = report_service.generate_report(ess)

        class_service.register_student("44444444444", "Dana")
        class_service.enroll(ess, "44444444444")
        after_enroll = report_service.generate_report(ess)

        assert after_enroll.total_enrolled == before.total_enrolled + 1
        assert "Dana" in [entry.name for entry in after_enroll.students]

        class_service.unenroll(ess, "44444444444")
        after_unenroll = report_service.generate_report(ess)

        assert after_unenroll.total_enrolled == before.total_enrolled
        assert "Dana" not in [entry.name for entry in after_unenroll.students]

    def test_read_after_grade_change(self, class_service, report_service, ess):
        class_service.set_evaluation(ess, "22222222222", "Design", "MANA")
        assert report_service.generate_report(ess).not_approved_count == 1

        class_service.set_evaluation(ess, "22222222222", "Design", "MA")
        report = report_service.generate_report(ess)
        assert report.not_approved_count == 0
        assert report.approved_count == 1
        assert report.pending_count == 2

    def test_unknown_class(self, report_service):
        with pytest.raises(ClassNotFoundError) as exc_info:
            report_service.generate_report("Nope-2025-1")
        assert exc_info.value.message == "Class not found: Nope-2025-1"

    def test_inconsistent_store_is_a_data_integrity_error(self, students, report_service, ess):
        students.delete("33333333333")
        with pytest.raises(DataIntegrityError):
            report_service.generate_report(ess)

    def test_compare_classes(self, class_service, report_service, ess):
        for cpf in ("11111111111", "22222222222"):
            class_service.set_evaluation(ess, cpf, "Design", "MA")
        class_service.set_evaluation(ess, "33333333333", "Design", "MANA")
        other = class_service.create_class("ESS", 2, 2025).class_id
        class_service.enroll(other, "11111111111")
        class_service.set_evaluation(other, "11111111111", "Design", "MPA")

        comparison = report_service.compare_classes([ess, other])

        assert [row["classId"] for row in comparison["classes"]] == [ess, other]
        assert comparison["classes"][0]["approvalRate"] == 67
        assert comparison["classes"][1]["statistics"]["meanGrade"] == 7.0
        assert comparison["aggregate"]["enrolled"] == 4
        assert comparison["aggregate"]["meanGrade"] == 7.75
        assert comparison["approvalRate"] == 75
        assert comparison["failureRate"] == 25


class TestJsonDataFile:

    def test_round_trip(self, tmp_path, class_service, report_service, students, classes, ess):
        class_service.set_evaluation(ess, "11111111111", "Design", "MA")
        class_service.set_evaluation(ess, "22222222222", "Tests", "MPA")
        path = str(tmp_path / "data.json")
        JsonDataFile(path).save(students, classes)

        loaded_students = StudentRepository()
        loaded_classes = ClassRepository(loaded_students)
        JsonDataFile(path).load(loaded_students, loaded_classes)

        assert loaded_classes.get_snapshot(ess) == classes.get_snapshot(ess)
        assert [s.name for s in loaded_students.find_all()] == ["Alice", "Bob", "Charlie"]

    def test_unknown_student_in_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({
            "students": [{"cpf": "111", "name": "Alice"}],
            "classes": [{"topic": "ESS", "semester": 1, "year": 2025,
                         "enrollments": [{"student": {"cpf": "111"}, "evaluations": []},
                                         {"student": {"cpf": "123"}, "evaluations": []}]}],
        }))
        students = StudentRepository()
        classes = ClassRepository(students)
        with pytest.raises(DataIntegrityError):
            JsonDataFile(str(path)).load(students, classes)

        assert classes.find_all() == []
        assert classes.find_by_id("ESS-2025-1") is None
