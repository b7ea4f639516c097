from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime


# Exam Schemas
class CreateExamRequest(BaseModel):
    """Request to create a new exam from a type tag."""
    type: str
    title: str = Field(min_length=1)
    sections: int = Field(ge=0, default=0)
    questions_per_section: int = Field(ge=0, default=0)


class CreateExamResponse(BaseModel):
    exam_id: int
    title: str
    type: str
    total_marks: int
    question_count: int


class AddQuestionRequest(BaseModel):
    """Add a question to one section of an exam (0-based section index)."""
    section: int = Field(ge=0)
    text: str = Field(min_length=1)
    options: Optional[List[str]] = None
    correct_answer: str
    marks: Optional[int] = Field(ge=0, default=None)


class QuestionResponse(BaseModel):
    """Question as shown to administrators."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    section: int
    position: int
    text: str
    options: Optional[List[str]] = None
    correct_answer: Optional[str] = None
    marks: int


class StudentQuestion(BaseModel):
    """Question as shown to students, without the correct answer."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    section: int
    text: str
    options: Optional[List[str]] = None
    marks: int


class ExamSummary(BaseModel):
    exam_id: int
    title: str
    type: str
    category: str
    section_count: int
    question_count: int
    total_marks: int
    duration_minutes: int


class StudentExamResponse(BaseModel):
    exam_id: int
    title: str
    type: str
    duration: int
    total_marks: int
    questions: List[StudentQuestion]


# Submission Schemas
class SubmitExamRequest(BaseModel):
    """Answers line up with the exam's questions, section by section."""
    exam_id: int
    answers: List[Optional[str]] = []


class SubmitExamResponse(BaseModel):
    exam_id: int
    score: int
    total_marks: int
    percentage: float
    message: str
    timestamp: datetime


# Analytics Schemas
class ExamStatistics(BaseModel):
    exam_id: int
    pass_mark: int
    total_students: int
    average_score: float
    passed_students: int
    failed_students: int
    pass_percentage: float


class ExportResponse(BaseModel):
    exported: bool
    path: str
    rows: int
