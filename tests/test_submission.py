import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from exam_portal.exceptions import ExamNotFound
from exam_portal.services import SubmissionCoordinator

from conftest import SAMPLE_ANSWERS, build_exam, make_student


def test_submit_scores_records_and_persists(coordinator, registry, student_repository, sample_exam):
    student = make_student("alice")

    result = coordinator.submit(sample_exam.id, student, ["4", "Paris", "H2O", "red"])

    assert result == 15
    assert student.score_for_exam(sample_exam.id) == 15
    assert [s.username for s in registry.students_for(sample_exam.id)] == ["alice"]

    stored = student_repository.find_by_username("alice")
    assert stored.score_for_exam(sample_exam.id) == 15


def test_unknown_exam_raises_and_records_nothing(coordinator, registry, student_repository):
    with pytest.raises(ExamNotFound) as excinfo:
        coordinator.submit(999, make_student("ghost"), SAMPLE_ANSWERS)

    assert excinfo.value.exam_id == 999
    assert registry.students_for(999) == []
    assert student_repository.find_by_username("ghost") is None


def test_resubmission_keeps_one_attempt_and_latest_score(
    coordinator, registry, student_repository, sample_exam
):
    coordinator.submit(sample_exam.id, make_student("bob"), SAMPLE_ANSWERS)
    # A later request resolves the same identity into a fresh object
    coordinator.submit(sample_exam.id, make_student("bob"), ["4"])

    attempts = registry.students_for(sample_exam.id)
    assert len(attempts) == 1
    assert attempts[0].score_for_exam(sample_exam.id) == 5
    assert student_repository.find_by_username("bob").score_for_exam(sample_exam.id) == 5


def test_scores_for_several_exams_are_kept_apart(
    coordinator, exam_repository, student_repository, sample_exam
):
    other = exam_repository.save(build_exam(title="Second", marks=2))
    student = student_repository.get_or_create("carol")

    coordinator.submit(sample_exam.id, student, SAMPLE_ANSWERS)
    coordinator.submit(other.id, student, SAMPLE_ANSWERS[:2])

    assert student.score_map() == {sample_exam.id: 20, other.id: 4}
    assert student_repository.find_by_username("carol").score_map() == {
        sample_exam.id: 20,
        other.id: 4,
    }


def test_fifty_concurrent_submissions(coordinator, registry, student_repository, sample_exam):
    students = [make_student(f"student-{i:02d}") for i in range(50)]
    # student i answers the first i % 5 questions correctly
    sheets = [SAMPLE_ANSWERS[: i % 5] for i in range(50)]
    barrier = threading.Barrier(50)

    def run(index):
        barrier.wait()
        return coordinator.submit(sample_exam.id, students[index], sheets[index])

    with ThreadPoolExecutor(max_workers=50) as pool:
        results = list(pool.map(run, range(50)))

    assert results == [(i % 5) * 5 for i in range(50)]
    attempts = registry.students_for(sample_exam.id)
    assert len(attempts) == 50
    assert {s.username for s in attempts} == {s.username for s in students}
    for index, student in enumerate(students):
        assert student.score_for_exam(sample_exam.id) == (index % 5) * 5
    assert len(student_repository.find_all()) == 50


def test_concurrent_resubmissions_by_one_student(coordinator, registry, sample_exam):
    student = make_student("dave")

    with ThreadPoolExecutor(max_workers=10) as pool:
        list(pool.map(lambda _: coordinator.submit(sample_exam.id, student, SAMPLE_ANSWERS), range(20)))

    assert len(registry.students_for(sample_exam.id)) == 1
    assert student.score_for_exam(sample_exam.id) == 20


def test_lock_is_shared_across_exams(exam_repository, student_repository, registry, sample_exam):
    """A submission for one exam waits while another exam's submission holds the lock"""
    other = exam_repository.save(build_exam(title="Other"))
    coordinator = SubmissionCoordinator(exam_repository, student_repository, registry)
    done = threading.Event()

    coordinator._lock.acquire()
    try:
        worker = threading.Thread(
            target=lambda: (coordinator.submit(other.id, make_student("erin"), SAMPLE_ANSWERS), done.set())
        )
        worker.start()
        assert not done.wait(0.2)
        assert registry.students_for(other.id) == []
    finally:
        coordinator._lock.release()

    worker.join(timeout=10)
    assert done.is_set()
    assert len(registry.students_for(other.id)) == 1
