"""
Per-goal evaluation performance across a class.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping

from .entities import Enrollment
from .enums import Grade
from .grading import average, round_half_up, value_of

DISTRIBUTION_ORDER = (Grade.MANA, Grade.MPA, Grade.MA)


@dataclass(frozen=True)
class GoalPerformance:
    """How the class performed on one goal."""
    goal: str
    average_grade: float
    grade_distribution: Mapping[Grade, int]
    evaluated_students: int

    def __post_init__(self):
        object.__setattr__(self, 'grade_distribution', MappingProxyType(dict(self.grade_distribution)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'goal': self.goal,
            'averageGrade': self.average_grade,
            'gradeDistribution': {
                grade.value: self.grade_distribution.get(grade, 0) for grade in DISTRIBUTION_ORDER
            },
            'evaluatedStudents': self.evaluated_students,
        }


class _GoalAccumulator:
    def __init__(self):
        self.values: List[int] = []
        self.distribution: Dict[Grade, int] = {grade: 0 for grade in DISTRIBUTION_ORDER}

    def add(self, grade: Grade) -> None:
        self.values.append(value_of(grade))
        self.distribution[grade] += 1


def aggregate_goal_performance(enrollments: Iterable[Enrollment]) -> List[GoalPerformance]:
    """Group every evaluation by goal, sorted by goal name."""
    accumulators: Dict[str, _GoalAccumulator] = {}
    for enrollment in enrollments:
        for record in enrollment.evaluations:
            accumulator = accumulators.get(record.goal)
            if accumulator is None:
                accumulator = accumulators[record.goal] = _GoalAccumulator()
            accumulator.add(record.grade)

    performance = []
    for goal in sorted(accumulators):
        accumulator = accumulators[goal]
        performance.append(GoalPerformance(
            goal=goal,
            average_grade=round_half_up(average(accumulator.values)),
            grade_distribution=accumulator.distribution,
            evaluated_students=len(accumulator.values),
        ))
    return performance
