"""
Submission registry: which students attempted which exam.
"""
import threading
from typing import Dict, List

from exam_portal.models import Student


class SubmissionRegistry:
    """
    Maps exam_id -> students that submitted it, keyed by username.

    Entries are created on the first submission for an exam and never
    removed. Readers always get a copy, never the live collection.
    """

    def __init__(self):
        # exam_id -> {username: Student}
        self._attempts: Dict[int, Dict[str, Student]] = {}
        self._lock = threading.Lock()

    def record(self, exam_id: int, student: Student) -> bool:
        """
        Add the student to the exam's attempt set.

        Returns True for a first attempt. A repeated attempt keeps a single
        entry and swaps in the latest Student object.
        """
        with self._lock:
            attempts = self._attempts.setdefault(exam_id, {})
            first_attempt = student.username not in attempts
            attempts[student.username] = student
            return first_attempt

    def students_for(self, exam_id: int) -> List[Student]:
        """Snapshot of the attempt set, empty when the exam was never attempted"""
        with self._lock:
            return list(self._attempts.get(exam_id, {}).values())
