from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship, attribute_keyed_dict
from exam_portal.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class StudentScore(Base):
    """Last computed score of a student for one exam"""
    __tablename__ = "student_scores"

    student_username = Column(String, ForeignKey("students.username", ondelete="CASCADE"), primary_key=True)
    exam_id = Column(Integer, ForeignKey("exams.id", ondelete="CASCADE"), primary_key=True)
    score = Column(Integer, nullable=False, default=0)
    submitted_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    student = relationship("Student", back_populates="scores")


class Student(Base):
    __tablename__ = "students"

    username = Column(String, primary_key=True)
    # Marker only, a stale id is allowed and grouped as "Unknown"
    current_exam_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    # exam_id -> StudentScore
    scores = relationship(
        "StudentScore",
        back_populates="student",
        collection_class=attribute_keyed_dict("exam_id"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def score_for_exam(self, exam_id: int) -> int:
        entry = self.scores.get(exam_id)
        return entry.score if entry is not None else 0

    def record_score(self, exam_id: int, score: int) -> None:
        """Keep at most one score per exam, a new one overwrites the old"""
        entry = self.scores.get(exam_id)
        if entry is None:
            self.scores[exam_id] = StudentScore(
                student_username=self.username, exam_id=exam_id, score=score
            )
        else:
            entry.score = score

    def score_map(self) -> dict:
        return {exam_id: entry.score for exam_id, entry in self.scores.items()}

    def __repr__(self):
        return f"<Student {self.username}>"
