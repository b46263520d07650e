"""
Persistence module: repositories and file storage.
"""

from .repositories import ClassRecord, ClassRepository, StudentRepository
from .data_file import JsonDataFile

__all__ = [
    "ClassRecord",
    "ClassRepository",
    "StudentRepository",
    "JsonDataFile",
]
