"""
API module for the REST implementation.
"""

from .rest_api import ClassReportRestAPI

__all__ = [
    "ClassReportRestAPI",
]
