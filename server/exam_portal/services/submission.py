"""
Submission coordinator.

One lock serializes every submission in the process, whatever the exam.
This is coarse, but it keeps the registry and a student's score mapping
free of lost updates when the same student resubmits concurrently.
"""
import logging
import threading
from typing import Optional, Sequence

from exam_portal.exceptions import ExamNotFound
from exam_portal.models import Student
from exam_portal.repositories import ExamRepository, StudentRepository
from exam_portal.services.registry import SubmissionRegistry
from exam_portal.services.scoring import score

logger = logging.getLogger(__name__)


class SubmissionCoordinator:
    def __init__(
        self,
        exam_repository: ExamRepository,
        student_repository: StudentRepository,
        registry: SubmissionRegistry,
    ):
        self.exam_repository = exam_repository
        self.student_repository = student_repository
        self.registry = registry
        self._lock = threading.Lock()

    def submit(self, exam_id: int, student: Student, answers: Sequence[Optional[str]]) -> int:
        """
        Score a student's answers for an exam and record the attempt.

        Raises:
            ExamNotFound: exam_id does not resolve
        """
        with self._lock:
            exam = self.exam_repository.find_by_id(exam_id)
            if exam is None:
                raise ExamNotFound(exam_id)

            total = score(exam, student, answers)
            first_attempt = self.registry.record(exam.id, student)
            self.student_repository.save_score(student.username, exam.id, total)

        logger.info(
            "Student %s %s exam %s: %d/%d",
            student.username,
            "submitted" if first_attempt else "resubmitted",
            exam.id,
            total,
            exam.total_marks,
        )
        return total
