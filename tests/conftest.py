import pytest
from fastapi.testclient import TestClient

from exam_portal.config import Settings
from exam_portal.database import init_db, make_engine, make_session_factory
from exam_portal.factory import ExamFactory
from exam_portal.main import create_app
from exam_portal.models import Exam, ExamType, Question, Student
from exam_portal.repositories import ExamRepository, StudentRepository
from exam_portal.services import (
    ExamService,
    StatisticsAggregator,
    SubmissionCoordinator,
    SubmissionRegistry,
)

# Correct answers of the sample exam, in question order
SAMPLE_ANSWERS = ["4", "Paris", "H2O", "blue"]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        export_dir=str(tmp_path / "exports"),
        log_level="DEBUG",
    )


@pytest.fixture
def session_factory(settings):
    engine = make_engine(settings.database_url)
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def exam_repository(session_factory):
    return ExamRepository(session_factory)


@pytest.fixture
def student_repository(session_factory):
    return StudentRepository(session_factory)


@pytest.fixture
def registry():
    return SubmissionRegistry()


@pytest.fixture
def factory():
    return ExamFactory(min_duration_minutes=10)


@pytest.fixture
def coordinator(exam_repository, student_repository, registry):
    return SubmissionCoordinator(exam_repository, student_repository, registry)


@pytest.fixture
def aggregator(registry, exam_repository):
    return StatisticsAggregator(registry, exam_repository, default_pass_mark=50)


@pytest.fixture
def exam_service(exam_repository, factory, registry):
    return ExamService(exam_repository, factory, registry)


def build_exam(title="General Knowledge", exam_type=ExamType.SHORT_ANSWER, marks=5):
    """2 sections x 2 questions, every question worth `marks`"""
    exam = Exam(title=title, type=exam_type, section_count=2, duration_minutes=30, questions=[])
    for index, answer in enumerate(SAMPLE_ANSWERS):
        exam.add_question(
            Question(text=f"Question {index + 1}", options=[], correct_answer=answer, marks=marks),
            index // 2,
        )
    return exam


@pytest.fixture
def sample_exam(exam_repository):
    return exam_repository.save(build_exam())


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


def make_student(username, current_exam_id=None):
    return Student(username=username, current_exam_id=current_exam_id)
