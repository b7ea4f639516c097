"""
Scoring engine: grades an ordered answer sheet against an exam.
"""
from typing import Optional, Sequence

from exam_portal.models import Exam, Student


def score_answers(exam: Exam, answers: Sequence[Optional[str]]) -> int:
    """
    Sum the marks of every correctly answered question.

    Answers line up with ``exam.question_sequence()``. When the lengths
    differ both sides are truncated to the shorter one: unanswered
    questions earn nothing and surplus answers are ignored.
    """
    return sum(
        question.grade(answer)
        for question, answer in zip(exam.question_sequence(), answers or [])
    )


def score(exam: Exam, student: Student, answers: Sequence[Optional[str]]) -> int:
    """Grade the answers and store the total in the student's score mapping"""
    total = score_answers(exam, answers)
    student.record_score(exam.id, total)
    return total
