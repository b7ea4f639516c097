"""
Models package initialization
Import all models here to ensure they are registered with SQLAlchemy
"""

from exam_portal.models.content import Exam, ExamType, Question
from exam_portal.models.user import Student, StudentScore

__all__ = [
    "Exam",
    "ExamType",
    "Question",
    "Student",
    "StudentScore",
]
