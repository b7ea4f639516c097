"""
Statistics over the students that attempted an exam.
"""
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from exam_portal.models import Student
from exam_portal.repositories import ExamRepository
from exam_portal.schemas import ExamStatistics
from exam_portal.services.registry import SubmissionRegistry

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY = "Unknown"


class StatisticsAggregator:
    def __init__(
        self,
        registry: SubmissionRegistry,
        exam_repository: ExamRepository,
        default_pass_mark: int = 50,
    ):
        self.registry = registry
        self.exam_repository = exam_repository
        self.default_pass_mark = default_pass_mark

    def students_for_exam(self, exam_id: int) -> List[Student]:
        return self.registry.students_for(exam_id)

    def passed_students(self, exam_id: int, pass_mark: int) -> List[Student]:
        """Students whose score is at least the pass mark"""
        return [
            student
            for student in self.registry.students_for(exam_id)
            if student.score_for_exam(exam_id) >= pass_mark
        ]

    def average_score(self, exam_id: int) -> float:
        students = self.registry.students_for(exam_id)
        if not students:
            return 0.0
        return sum(s.score_for_exam(exam_id) for s in students) / len(students)

    def statistics(self, exam_id: int, pass_mark: Optional[int] = None) -> ExamStatistics:
        if pass_mark is None:
            pass_mark = self.default_pass_mark

        # One snapshot so every figure describes the same attempt set
        students = self.registry.students_for(exam_id)
        scores = [s.score_for_exam(exam_id) for s in students]
        total = len(scores)
        passed = sum(1 for value in scores if value >= pass_mark)

        return ExamStatistics(
            exam_id=exam_id,
            pass_mark=pass_mark,
            total_students=total,
            average_score=(sum(scores) / total) if total else 0.0,
            passed_students=passed,
            failed_students=total - passed,
            pass_percentage=(passed * 100.0 / total) if total else 0.0,
        )

    def group_by_category(self, students: Iterable[Student]) -> Dict[str, List[Student]]:
        """
        Group students by the display name of their current exam's type.

        Students without a current exam, or whose exam cannot be resolved,
        land in the "Unknown" group. A failed lookup only affects the
        students pointing at that exam.
        """
        groups: Dict[str, List[Student]] = defaultdict(list)
        labels: Dict[int, str] = {}

        for student in students:
            exam_id = student.current_exam_id
            if exam_id is None:
                groups[UNKNOWN_CATEGORY].append(student)
                continue
            if exam_id not in labels:
                labels[exam_id] = self._category_label(exam_id)
            groups[labels[exam_id]].append(student)

        return dict(groups)

    def _category_label(self, exam_id: int) -> str:
        try:
            exam = self.exam_repository.find_by_id(exam_id)
        except (SQLAlchemyError, LookupError) as e:
            logger.warning("Could not resolve exam %s for grouping: %s", exam_id, e)
            return UNKNOWN_CATEGORY
        if exam is None:
            logger.debug("Exam %s no longer exists, grouping as %s", exam_id, UNKNOWN_CATEGORY)
            return UNKNOWN_CATEGORY
        return exam.type.display_name
