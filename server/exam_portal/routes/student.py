from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends

from exam_portal.dependencies import ServiceContainer, get_current_student, get_services
from exam_portal.models import Student
from exam_portal.routes.admin import exam_summary
from exam_portal.schemas import (
    ExamSummary,
    StudentExamResponse,
    StudentQuestion,
    SubmitExamRequest,
    SubmitExamResponse,
)

router = APIRouter(tags=["Student"])


@router.get("/exams", response_model=List[ExamSummary])
def available_exams(
    student: Student = Depends(get_current_student),
    services: ServiceContainer = Depends(get_services),
):
    """Exams a student can take"""
    return [exam_summary(exam) for exam in services.exam_service.list_exams()]


@router.get("/exam/{exam_id}", response_model=StudentExamResponse)
def start_exam(
    exam_id: int,
    student: Student = Depends(get_current_student),
    services: ServiceContainer = Depends(get_services),
):
    """
    Start an exam: returns its questions without answers and marks it
    as the student's current exam
    """
    exam = services.exam_service.get_exam(exam_id)
    services.student_repository.set_current_exam(student.username, exam.id)
    return StudentExamResponse(
        exam_id=exam.id,
        title=exam.title,
        type=exam.type.name,
        duration=exam.duration_minutes,
        total_marks=exam.total_marks,
        questions=[StudentQuestion.model_validate(q) for q in exam.question_sequence()],
    )


@router.post("/submit", response_model=SubmitExamResponse)
def submit_exam(
    request: SubmitExamRequest,
    student: Student = Depends(get_current_student),
    services: ServiceContainer = Depends(get_services),
):
    """
    Submit all answers of an exam, in question order
    """
    score = services.coordinator.submit(request.exam_id, student, request.answers)
    exam = services.exam_service.get_exam(request.exam_id)

    total_marks = exam.total_marks
    percentage = (score * 100.0 / total_marks) if total_marks > 0 else 0.0
    return SubmitExamResponse(
        exam_id=exam.id,
        score=score,
        total_marks=total_marks,
        percentage=round(percentage, 2),
        message="Exam submitted successfully",
        timestamp=datetime.now(timezone.utc),
    )
