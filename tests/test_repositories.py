import threading
from concurrent.futures import ThreadPoolExecutor

from conftest import build_exam


def run_together(count, target):
    barrier = threading.Barrier(count)

    def run(index):
        barrier.wait()
        return target(index)

    with ThreadPoolExecutor(max_workers=count) as pool:
        return list(pool.map(run, range(count)))


def test_get_or_create_registers_once(student_repository):
    first = student_repository.get_or_create("zoe")
    again = student_repository.get_or_create("zoe")

    assert first.username == again.username == "zoe"
    assert again.score_map() == {}
    assert [s.username for s in student_repository.find_all()] == ["zoe"]


def test_concurrent_first_use_of_one_username(student_repository):
    for round_number in range(20):
        username = f"newbie-{round_number}"

        students = run_together(8, lambda _: student_repository.get_or_create(username))

        assert {s.username for s in students} == {username}
    assert len(student_repository.find_all()) == 20


def test_current_exam_and_score_race_on_a_new_student(student_repository, exam_repository):
    exam = exam_repository.save(build_exam())

    for round_number in range(20):
        username = f"racer-{round_number}"

        def touch(index):
            if index % 2:
                student_repository.save_score(username, exam.id, 15)
            else:
                student_repository.set_current_exam(username, exam.id)

        run_together(4, touch)

        stored = student_repository.find_by_username(username)
        assert stored.current_exam_id == exam.id
        assert stored.score_for_exam(exam.id) == 15
