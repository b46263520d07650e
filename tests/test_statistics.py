"""Tests for class statistics and comparison."""

from classreport.core import (
    ClassStatistics, aggregate_statistics, approval_rate, failure_rate
)


class TestClassStatistics:

    def test_from_report(self, generator, abc_snapshot):
        stats = ClassStatistics.from_report(generator.generate(abc_snapshot))
        assert stats == ClassStatistics(mean_grade=7.0, enrolled=3, graded=3, approved=2,
                                        failed_by_grade=1, failed_by_absence=0)

    def test_from_report_without_data(self, generator, make_snapshot):
        stats = ClassStatistics.from_report(generator.generate(make_snapshot([])))
        assert stats.mean_grade is None
        assert stats.enrolled == 0
        assert stats.graded == 0

    def test_from_report_counts_only_graded_students(self, generator, make_enrollment, make_snapshot):
        snapshot = make_snapshot([
            make_enrollment("1", "MA"),
            make_enrollment("2"),
        ])
        stats = ClassStatistics.from_report(generator.generate(snapshot))
        assert stats.mean_grade == 10.0
        assert stats.enrolled == 2
        assert stats.graded == 1

    def test_rates(self):
        stats = ClassStatistics(mean_grade=7.0, enrolled=3, graded=3, approved=2, failed_by_grade=1)
        assert approval_rate(stats) == 67
        assert failure_rate(stats) == 33

    def test_rates_with_nobody_enrolled(self):
        assert approval_rate(ClassStatistics()) == 0
        assert failure_rate(ClassStatistics()) == 0

    def test_failure_rate_includes_absence(self):
        stats = ClassStatistics(enrolled=4, failed_by_grade=1, failed_by_absence=1)
        assert failure_rate(stats) == 50


class TestAggregateStatistics:

    def test_weighted_mean(self):
        aggregate = aggregate_statistics([
            ClassStatistics(mean_grade=7.0, enrolled=3, graded=3, approved=2, failed_by_grade=1),
            ClassStatistics(mean_grade=10.0, enrolled=1, graded=1, approved=1),
        ])
        assert aggregate == ClassStatistics(mean_grade=7.75, enrolled=4, graded=4, approved=3,
                                            failed_by_grade=1, failed_by_absence=0)

    def test_class_without_grades_does_not_pull_mean_down(self):
        aggregate = aggregate_statistics([
            ClassStatistics(mean_grade=10.0, enrolled=10, graded=10, approved=10),
            ClassStatistics(mean_grade=None, enrolled=10, graded=0),
        ])
        assert aggregate.mean_grade == 10.0
        assert aggregate.enrolled == 20
        assert aggregate.graded == 10

    def test_pending_students_do_not_weight_mean(self):
        aggregate = aggregate_statistics([
            ClassStatistics(mean_grade=10.0, enrolled=5, graded=1, approved=1),
            ClassStatistics(mean_grade=4.0, enrolled=1, graded=1, failed_by_grade=1),
        ])
        assert aggregate.mean_grade == 7.0

    def test_from_generated_reports(self, generator, make_enrollment, make_snapshot):
        graded = make_snapshot([make_enrollment(str(i), "MA") for i in range(10)])
        ungraded = make_snapshot([make_enrollment(str(i)) for i in range(10)])
        aggregate = aggregate_statistics(
            ClassStatistics.from_report(generator.generate(snapshot)) for snapshot in (graded, ungraded)
        )
        assert aggregate.mean_grade == 10.0

    def test_no_class_with_data(self):
        aggregate = aggregate_statistics([ClassStatistics(enrolled=3), ClassStatistics(enrolled=2)])
        assert aggregate.mean_grade is None
        assert aggregate.enrolled == 5

    def test_empty(self):
        assert aggregate_statistics([]) == ClassStatistics()
        assert aggregate_statistics([ClassStatistics()]) == ClassStatistics()

    def test_serialized_shape(self):
        assert ClassStatistics(mean_grade=8.5, enrolled=2, graded=2, approved=2).to_dict() == {
            "meanGrade": 8.5,
            "enrolled": 2,
            "graded": 2,
            "approved": 2,
            "failedByGrade": 0,
            "failedByAbsence": 0,
        }
        assert ClassStatistics().to_dict()["meanGrade"] is None
