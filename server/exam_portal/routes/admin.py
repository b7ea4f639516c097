import os
from typing import List, Optional

from fastapi import APIRouter, Depends

from exam_portal.dependencies import ServiceContainer, get_services
from exam_portal.models import Exam
from exam_portal.schemas import (
    AddQuestionRequest,
    CreateExamRequest,
    CreateExamResponse,
    ExamStatistics,
    ExamSummary,
    ExportResponse,
    QuestionResponse,
)

router = APIRouter(tags=["Admin"])


def exam_summary(exam: Exam) -> ExamSummary:
    return ExamSummary(
        exam_id=exam.id,
        title=exam.title,
        type=exam.type.name,
        category=exam.type.display_name,
        section_count=exam.section_count,
        question_count=len(exam.questions),
        total_marks=exam.total_marks,
        duration_minutes=exam.duration_minutes,
    )


@router.post("/exams", response_model=CreateExamResponse, status_code=201)
def create_exam(request: CreateExamRequest, services: ServiceContainer = Depends(get_services)):
    """
    Create an exam skeleton from a type tag, then store it
    """
    exam_service = services.exam_service
    exam = exam_service.create_exam(
        request.type, request.title, request.sections, request.questions_per_section
    )
    exam = exam_service.save_exam(exam)
    return CreateExamResponse(
        exam_id=exam.id,
        title=exam.title,
        type=exam.type.name,
        total_marks=exam.total_marks,
        question_count=len(exam.questions),
    )


@router.get("/exams", response_model=List[ExamSummary])
def list_exams(type: Optional[str] = None, services: ServiceContainer = Depends(get_services)):
    if type:
        exams = services.exam_service.list_exams_by_type(type)
    else:
        exams = services.exam_service.list_exams()
    return [exam_summary(exam) for exam in exams]


@router.get("/exams/{exam_id}")
def get_exam(exam_id: int, services: ServiceContainer = Depends(get_services)):
    """Exam with every question, correct answers included"""
    exam = services.exam_service.get_exam(exam_id)
    return {
        **exam_summary(exam).model_dump(),
        "questions": [
            QuestionResponse.model_validate(q).model_dump() for q in exam.question_sequence()
        ],
    }


@router.post("/exams/{exam_id}/questions", response_model=QuestionResponse, status_code=201)
def add_question(
    exam_id: int,
    request: AddQuestionRequest,
    services: ServiceContainer = Depends(get_services),
):
    question = services.exam_service.add_question(
        exam_id,
        request.section,
        request.text,
        request.correct_answer,
        options=request.options,
        marks=request.marks,
    )
    return QuestionResponse.model_validate(question)


@router.get("/exams/{exam_id}/metadata")
def exam_metadata(exam_id: int, services: ServiceContainer = Depends(get_services)):
    exam = services.exam_service.get_exam(exam_id)
    return services.exam_service.exam_metadata(exam)


@router.get("/analytics/{exam_id}")
def exam_analytics(
    exam_id: int,
    pass_mark: Optional[int] = None,
    services: ServiceContainer = Depends(get_services),
):
    """
    Pass/fail counts, average and pass percentage over everyone
    who submitted the exam
    """
    services.exam_service.get_exam(exam_id)
    stats: ExamStatistics = services.statistics.statistics(exam_id, pass_mark)
    return {
        "totalStudents": stats.total_students,
        "passedStudents": stats.passed_students,
        "failedStudents": stats.failed_students,
        "averageScore": stats.average_score,
        "passPercentage": stats.pass_percentage,
    }


@router.get("/students/grouped")
def grouped_students(services: ServiceContainer = Depends(get_services)):
    """Students grouped by the category of the exam they are currently taking"""
    students = services.student_repository.find_all()
    groups = services.statistics.group_by_category(students)
    return {
        category: [student.username for student in members]
        for category, members in groups.items()
    }


@router.post("/exams/{exam_id}/export", response_model=ExportResponse)
def export_results(exam_id: int, services: ServiceContainer = Depends(get_services)):
    """
    Write exam results to a CSV under the export directory.
    A failed write is reported with exported=false, not as an error.
    """
    exam_service = services.exam_service
    exam_service.get_exam(exam_id)
    results = exam_service.exam_results(exam_id)
    path = os.path.join(services.settings.export_dir, f"exam_{exam_id}_results.csv")
    exported = exam_service.save_results_to_file(path, results)
    return ExportResponse(exported=exported, path=path, rows=len(results))
