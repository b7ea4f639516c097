"""
Exam service: creation, lookup, question management and result export.
"""
import logging
import threading
from typing import Any, Dict, List, Mapping, Optional, Union

from exam_portal.exceptions import ExamNotFound, InvalidSection
from exam_portal.factory import ExamFactory
from exam_portal.models import Exam, ExamType, Question
from exam_portal.repositories import ExamRepository
from exam_portal.services.export import save_results_to_csv
from exam_portal.services.registry import SubmissionRegistry

logger = logging.getLogger(__name__)


class ExamService:
    def __init__(
        self,
        exam_repository: ExamRepository,
        factory: ExamFactory,
        registry: SubmissionRegistry,
    ):
        self.exam_repository = exam_repository
        self.factory = factory
        self.registry = registry
        # Serializes read-modify-save of an exam's question slots
        self._questions_lock = threading.Lock()

    def create_exam(
        self,
        exam_type: Union[ExamType, str],
        title: str,
        sections: int = 0,
        questions_per_section: int = 0,
    ) -> Exam:
        """Build an unsaved exam through the factory"""
        return self.factory.create_exam(exam_type, title, sections, questions_per_section)

    def save_exam(self, exam: Exam) -> Exam:
        saved = self.exam_repository.save(exam)
        logger.info("Saved exam %s (%s)", saved.id, saved.title)
        return saved

    def get_exam(self, exam_id: int) -> Exam:
        exam = self.exam_repository.find_by_id(exam_id)
        if exam is None:
            raise ExamNotFound(exam_id)
        return exam

    def list_exams(self) -> List[Exam]:
        return self.exam_repository.find_all()

    def list_exams_by_type(self, exam_type: Union[ExamType, str]) -> List[Exam]:
        return self.exam_repository.find_by_type(ExamType.from_tag(exam_type))

    def add_question(
        self,
        exam_id: int,
        section: int,
        text: str,
        correct_answer: str,
        options: Optional[List[str]] = None,
        marks: Optional[int] = None,
    ) -> Question:
        """
        Add a question to a section of an existing exam.

        The question takes the section's first placeholder slot left by the
        factory; once the section has none left it is appended at the end.
        Marks default to the exam type's per-question marks.

        Raises:
            ExamNotFound: exam_id does not resolve
            InvalidSection: section outside 0..section_count-1
        """
        with self._questions_lock:
            exam = self.get_exam(exam_id)
            if not 0 <= section < exam.section_count:
                raise InvalidSection(exam_id, section)

            question = exam.fill_question(
                Question(
                    text=text,
                    options=list(options or []),
                    correct_answer=correct_answer,
                    marks=marks if marks is not None else exam.type.default_marks,
                ),
                section,
            )
            saved = self.exam_repository.save(exam)

        stored = next(
            q for q in saved.questions
            if q.section == question.section and q.position == question.position
        )
        logger.info("Added question %s to exam %s section %d", stored.id, exam_id, section)
        return stored

    def exam_metadata(self, exam: Exam) -> Dict[str, Any]:
        """Explicit listing of the exam's fields"""
        return {
            "id": exam.id,
            "title": exam.title,
            "type": exam.type.name,
            "category": exam.type.display_name,
            "section_count": exam.section_count,
            "question_count": len(exam.questions),
            "questions_per_section": [len(qs) for qs in exam.sections()],
            "total_marks": exam.total_marks,
            "duration_minutes": exam.duration_minutes,
            "created_at": exam.created_at.isoformat() if exam.created_at else None,
        }

    def exam_results(self, exam_id: int) -> Dict[str, int]:
        """username -> score for everyone who attempted the exam"""
        return {
            student.username: student.score_for_exam(exam_id)
            for student in self.registry.students_for(exam_id)
        }

    def save_results_to_file(self, file_path: str, results: Mapping[str, int]) -> bool:
        """
        Export results as CSV. A failed export is logged and reported as
        False, never raised.
        """
        try:
            save_results_to_csv(file_path, results)
        except OSError as e:
            logger.error("Error saving results to file %s: %s", file_path, e)
            return False
        logger.info("Exported %d results to %s", len(results), file_path)
        return True
