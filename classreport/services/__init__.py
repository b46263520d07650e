"""
Services module: class management and reporting.
"""

from .class_service import ClassService
from .report_service import ReportService

__all__ = [
    "ClassService",
    "ReportService",
]
