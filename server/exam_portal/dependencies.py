"""
Service wiring and FastAPI dependencies.

All shared state (registry, coordinator lock, repositories) lives in one
ServiceContainer per application, stored on ``app.state``.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import sessionmaker

from exam_portal.config import Settings
from exam_portal.factory import ExamFactory
from exam_portal.models import Student
from exam_portal.repositories import ExamRepository, StudentRepository
from exam_portal.services import (
    ExamService,
    StatisticsAggregator,
    SubmissionCoordinator,
    SubmissionRegistry,
)


@dataclass
class ServiceContainer:
    settings: Settings
    exam_repository: ExamRepository
    student_repository: StudentRepository
    registry: SubmissionRegistry
    exam_service: ExamService
    coordinator: SubmissionCoordinator
    statistics: StatisticsAggregator


def build_services(settings: Settings, session_factory: sessionmaker) -> ServiceContainer:
    exam_repository = ExamRepository(session_factory)
    student_repository = StudentRepository(session_factory)
    registry = SubmissionRegistry()
    factory = ExamFactory(min_duration_minutes=settings.min_duration_minutes)

    return ServiceContainer(
        settings=settings,
        exam_repository=exam_repository,
        student_repository=student_repository,
        registry=registry,
        exam_service=ExamService(exam_repository, factory, registry),
        coordinator=SubmissionCoordinator(exam_repository, student_repository, registry),
        statistics=StatisticsAggregator(
            registry, exam_repository, default_pass_mark=settings.default_pass_mark
        ),
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_current_student(
    x_username: Optional[str] = Header(default=None),
    services: ServiceContainer = Depends(get_services),
) -> Student:
    """Resolve the caller from the X-Username header"""
    username = (x_username or "").strip()
    if not username:
        raise HTTPException(status_code=401, detail="Authentication required")
    return services.student_repository.get_or_create(username)
