"""
Service layer: scoring, submission, statistics and exam management.
"""
from exam_portal.services.exam_service import ExamService
from exam_portal.services.registry import SubmissionRegistry
from exam_portal.services.scoring import score, score_answers
from exam_portal.services.statistics import StatisticsAggregator, UNKNOWN_CATEGORY
from exam_portal.services.submission import SubmissionCoordinator

__all__ = [
    "ExamService",
    "StatisticsAggregator",
    "SubmissionCoordinator",
    "SubmissionRegistry",
    "UNKNOWN_CATEGORY",
    "score",
    "score_answers",
]
