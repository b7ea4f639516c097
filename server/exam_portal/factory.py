"""
Exam Factory.

Builds exam skeletons: a number of sections, each pre-populated with
placeholder questions whose marks depend on the exam type.
"""
import logging
from typing import Union

from exam_portal.models import Exam, ExamType, Question

logger = logging.getLogger(__name__)


def placeholder_text(section: int, number: int) -> str:
    """Prompt of a placeholder question, sections and numbers shown 1-based"""
    return f"Section {section + 1}, Question {number + 1}"


class ExamFactory:
    """Creates unsaved exams for every known exam type."""

    def __init__(self, min_duration_minutes: int = 10):
        self.min_duration_minutes = min_duration_minutes

    def create_exam(
        self,
        exam_type: Union[ExamType, str],
        title: str,
        section_count: int = 0,
        questions_per_section: int = 0,
    ) -> Exam:
        """
        Build an exam skeleton.

        Args:
            exam_type: ExamType or tag such as "CODING" (case-insensitive)
            title: Exam title
            section_count: Number of sections, 0 for none
            questions_per_section: Placeholder questions per section, 0 for none

        Raises:
            InvalidExamType: unknown type tag
            ValueError: negative counts
        """
        resolved = ExamType.from_tag(exam_type)
        if section_count < 0 or questions_per_section < 0:
            raise ValueError("section_count and questions_per_section must be >= 0")

        exam = Exam(title=title, type=resolved, section_count=section_count, questions=[])
        for section in range(section_count):
            for number in range(questions_per_section):
                exam.add_question(
                    Question(
                        text=placeholder_text(section, number),
                        options=[],
                        correct_answer=None,
                        marks=resolved.default_marks,
                    ),
                    section,
                )

        question_count = section_count * questions_per_section
        exam.duration_minutes = max(
            self.min_duration_minutes, question_count * resolved.minutes_per_question
        )
        logger.info(
            "Built %s exam %r with %d sections x %d questions",
            resolved.display_name, title, section_count, questions_per_section,
        )
        return exam
