"""
Behaviour shared by every storage backend
"""
from datetime import datetime

from app.services.stats_service import stats_service
from app.services.quiz_service import quiz_service


def test_get_questions_keeps_order_and_skips_missing(storage, make_question):
    first = make_question(storage)
    second = make_question(storage)

    found = storage.get_questions([second.id, 99, first.id])

    assert [q.id for q in found] == [second.id, first.id]


def test_delete_category_detaches_questions_and_stats(storage, make_question):
    category = storage.create_category(name="React", color="#61dafb")
    question = make_question(storage, category=category.id)
    storage.save_user_stats(1, category.id, total_attempts=1, correct_answers=1, streak=1)

    assert storage.delete_category(category.id) is True

    assert storage.get_question(question.id).category is None
    assert storage.list_user_stats(1) == []
    assert storage.delete_category(category.id) is False


def test_delete_subject_keeps_questions(storage, make_question):
    subject = storage.create_subject(name="JavaScript", description="JS")
    question = make_question(storage, subject=subject.id)

    assert storage.delete_subject(subject.id) is True

    assert storage.get_question(question.id).subject is None


def test_update_subject(storage):
    subject = storage.create_subject(name="Old")

    updated = storage.update_subject(subject.id, name="New")

    assert updated.name == "New"
    assert storage.update_subject(404, name="x") is None


def test_save_answer_upserts(storage, make_question):
    question = make_question(storage)
    attempt = storage.create_attempt(None, [question.id])
    now = datetime(2024, 1, 1, 12, 0, 0)

    storage.save_answer(attempt.id, question.id, 0, False, 3, now)
    storage.save_answer(attempt.id, question.id, 1, True, 6, now)

    [answer] = storage.list_answers(attempt.id)
    assert answer.chosen_answer == 1
    assert answer.correct is True
    assert answer.time_spent == 6
    assert storage.question_has_answers(question.id) is True


def test_category_lookup_by_name(storage):
    storage.create_category(name="Algorithms", color="#ff5722")

    assert storage.get_category_by_name("Algorithms").color == "#ff5722"
    assert storage.get_category_by_name("Nope") is None


def test_user_lookup(storage):
    user = storage.create_user(username="bob", password_hash="hash", display_name="Bob")

    assert storage.get_user(user.id).username == "bob"
    assert storage.get_user_by_username("bob").id == user.id
    assert storage.get_user_by_username("carol") is None


def test_attempt_result_breakdown(storage, make_question):
    python = storage.create_category(name="Python", color="#3776ab")
    react = storage.create_category(name="React", color="#61dafb")
    q1 = make_question(storage, category=python.id)
    q2 = make_question(storage, category=python.id)
    q3 = make_question(storage, category=react.id)
    q4 = make_question(storage)

    attempt, _ = quiz_service.start(storage, None, [q1.id, q2.id, q3.id, q4.id])
    quiz_service.submit_answer(storage, attempt.id, q1.id, 1, time_spent=10)
    quiz_service.submit_answer(storage, attempt.id, q2.id, 0, time_spent=6)
    quiz_service.submit_answer(storage, attempt.id, q3.id, 1, time_spent=4, is_last=True)

    result = stats_service.get_attempt_result(storage, attempt.id)

    assert result["score"] == 50
    assert result["correct_answers"] == 2
    assert result["time_spent"] == 20
    assert result["average_time_per_question"] == 5.0

    by_name = {c["name"]: c for c in result["category_performance"]}
    assert by_name["Python"]["score"] == 50
    assert by_name["Python"]["questions_count"] == 2
    assert by_name["React"]["score"] == 100
    assert by_name["Uncategorized"]["score"] == 0
