"""
classreport: class enrollment, evaluation and performance reporting.

Keeps classes, enrollments and per-goal evaluations, and renders a
deterministic performance report for any class on demand.
"""

__version__ = "1.0.0"
__author__ = "classreport Development Team"
__description__ = "Class enrollment, evaluation and performance reporting"
