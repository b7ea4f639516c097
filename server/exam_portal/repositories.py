"""
Persistence collaborators backed by SQLAlchemy.

Each call opens its own short session. Sessions are created with
``expire_on_commit=False`` and relationships load eagerly, so the returned
entities stay readable after the session is closed.
"""
import logging
from typing import Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from exam_portal.models import Exam, ExamType, Student

logger = logging.getLogger(__name__)

# The student row and then a score row can each lose one insert race
_ATTEMPTS = 3


class ExamRepository:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def save(self, exam: Exam) -> Exam:
        """Insert or update an exam together with its questions"""
        with self._session_factory() as db:
            merged = db.merge(exam)
            db.commit()
            return merged

    def find_by_id(self, exam_id) -> Optional[Exam]:
        if exam_id is None:
            return None
        with self._session_factory() as db:
            return db.get(Exam, exam_id)

    def find_all(self) -> List[Exam]:
        with self._session_factory() as db:
            return list(db.scalars(select(Exam).order_by(Exam.id)))

    def find_by_type(self, exam_type: ExamType) -> List[Exam]:
        with self._session_factory() as db:
            stmt = select(Exam).where(Exam.type == exam_type).order_by(Exam.id)
            return list(db.scalars(stmt))


class StudentRepository:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def find_by_username(self, username: str) -> Optional[Student]:
        with self._session_factory() as db:
            return db.get(Student, username)

    def get_or_create(self, username: str) -> Student:
        return self._update(username)

    def find_all(self) -> List[Student]:
        with self._session_factory() as db:
            return list(db.scalars(select(Student).order_by(Student.username)))

    def save_score(self, username: str, exam_id: int, score: int) -> None:
        """Upsert the score row, creating the student row on first use"""
        self._update(username, lambda student: student.record_score(exam_id, score))

    def set_current_exam(self, username: str, exam_id: Optional[int]) -> None:
        def mark(student):
            student.current_exam_id = exam_id

        self._update(username, mark)

    def _update(self, username: str, change: Optional[Callable[[Student], None]] = None) -> Student:
        """
        Load the student, creating the row on first use, apply `change` and
        commit. Another request may insert the same username between the
        lookup and the commit; the losing insert is rolled back and the
        change is applied again to the rows that won.
        """
        for attempt in range(1, _ATTEMPTS + 1):
            with self._session_factory() as db:
                student = db.get(Student, username)
                created = student is None
                if created:
                    student = Student(username=username)
                    student.scores  # start with a loaded, empty score mapping
                    db.add(student)
                if change is not None:
                    change(student)
                try:
                    db.commit()
                except IntegrityError:
                    db.rollback()
                    if attempt == _ATTEMPTS:
                        raise
                    logger.debug("Concurrent insert for student %s, retrying", username)
                    continue
                if created:
                    logger.info("Registered student %s", username)
                return student
