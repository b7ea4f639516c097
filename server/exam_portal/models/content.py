from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from exam_portal.database import Base
from exam_portal.exceptions import InvalidExamType
import enum


def _utcnow():
    return datetime.now(timezone.utc)


class ExamType(str, enum.Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"
    CODING = "coding"

    @property
    def display_name(self) -> str:
        return _TYPE_DEFAULTS[self]["display_name"]

    @property
    def default_marks(self) -> int:
        """Marks given to each placeholder question built by the factory"""
        return _TYPE_DEFAULTS[self]["marks"]

    @property
    def minutes_per_question(self) -> int:
        return _TYPE_DEFAULTS[self]["minutes"]

    @classmethod
    def from_tag(cls, tag) -> "ExamType":
        """Resolve a tag such as "CODING" or "coding" (case-insensitive)"""
        if isinstance(tag, cls):
            return tag
        if not isinstance(tag, str):
            raise InvalidExamType(tag)
        try:
            return cls(tag.strip().lower())
        except ValueError:
            raise InvalidExamType(tag) from None


_TYPE_DEFAULTS = {
    ExamType.MULTIPLE_CHOICE: {"display_name": "Multiple Choice", "marks": 1, "minutes": 2},
    ExamType.TRUE_FALSE: {"display_name": "True / False", "marks": 1, "minutes": 1},
    ExamType.SHORT_ANSWER: {"display_name": "Short Answer", "marks": 5, "minutes": 5},
    ExamType.CODING: {"display_name": "Coding", "marks": 10, "minutes": 15},
}


class Question(Base):
    """A question inside one section of an exam"""
    __tablename__ = "questions"
    __table_args__ = (UniqueConstraint("exam_id", "section", "position", name="uq_question_slot"),)

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    section = Column(Integer, nullable=False, default=0)
    position = Column(Integer, nullable=False, default=0)  # order inside the section
    text = Column(Text, nullable=False)
    options = Column(JSON, nullable=True)  # For multiple choice: ["A", "B", ...]
    correct_answer = Column(Text, nullable=True)  # None for unanswerable placeholders
    marks = Column(Integer, nullable=False, default=1)

    # Relationships
    exam = relationship("Exam", back_populates="questions")

    @property
    def is_placeholder(self) -> bool:
        return self.correct_answer is None

    def grade(self, answer) -> int:
        """Full marks on an exact, case-sensitive match, otherwise zero"""
        if answer is None or self.correct_answer is None:
            return 0
        return self.marks if answer == self.correct_answer else 0

    def __repr__(self):
        return f"<Question {self.id} exam={self.exam_id} section={self.section}>"


class Exam(Base):
    """Exams created by administrators"""
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    type = Column(SQLEnum(ExamType), nullable=False, index=True)
    section_count = Column(Integer, nullable=False, default=0)
    duration_minutes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    questions = relationship(
        "Question",
        back_populates="exam",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=[Question.section, Question.position],
    )

    @property
    def total_marks(self) -> int:
        return sum(q.marks or 0 for q in self.questions)

    def question_sequence(self) -> list:
        """All questions flattened in (section, position) order"""
        return sorted(self.questions, key=lambda q: (q.section, q.position))

    def sections(self) -> list:
        """Questions grouped per section, one (possibly empty) list for each section"""
        grouped = [[] for _ in range(self.section_count or 0)]
        for question in self.question_sequence():
            if 0 <= question.section < len(grouped):
                grouped[question.section].append(question)
        return grouped

    def add_question(self, question: Question, section: int) -> Question:
        """Append a question at the end of the given section"""
        question.section = section
        question.position = sum(1 for q in self.questions if q.section == section)
        self.questions.append(question)
        return question

    def fill_question(self, question: Question, section: int) -> Question:
        """
        Put a question into the first placeholder slot of a section, or
        append it when every slot of the section is already filled.
        """
        for slot in self.question_sequence():
            if slot.section == section and slot.is_placeholder:
                slot.text = question.text
                slot.options = question.options
                slot.correct_answer = question.correct_answer
                slot.marks = question.marks
                return slot
        return self.add_question(question, section)

    def __repr__(self):
        return f"<Exam {self.id} {self.title!r} ({self.type})>"
