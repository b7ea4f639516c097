"""Exceptions raised by the exam services"""


class ExamPortalError(Exception):
    """Base exception for the exam portal"""


class ExamNotFound(ExamPortalError):
    """No exam exists with the requested id"""

    def __init__(self, exam_id):
        self.exam_id = exam_id
        super().__init__(f"Exam not found with id: {exam_id}")


class InvalidExamType(ExamPortalError):
    """The exam type tag is not one of the known types"""

    def __init__(self, tag):
        self.tag = tag
        super().__init__(f"Invalid exam type: {tag}")


class InvalidSection(ExamPortalError):
    """A question was added to a section the exam does not have"""

    def __init__(self, exam_id, section):
        self.exam_id = exam_id
        self.section = section
        super().__init__(f"Exam {exam_id} has no section {section}")
