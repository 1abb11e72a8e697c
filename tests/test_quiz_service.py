"""
Tests for the attempt lifecycle against both storage backends
"""
import pytest

from app.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from app.schemas.question import QuestionPublic
from app.services.quiz_service import quiz_service
from app.services.scoring_service import score_answers


@pytest.fixture
def questions(storage, make_question):
    """Twelve questions with ids 1..12; the correct option is index 1"""
    category = storage.create_category(name="Python", color="#3776ab")
    return [
        make_question(storage, question=f"Question {n}", category=category.id)
        for n in range(1, 13)
    ]


@pytest.fixture
def user(storage):
    return storage.create_user(username="alice", password_hash="x")


class TestStart:

    def test_total_questions_and_stripped_payload(self, storage, questions):
        attempt, selected = quiz_service.start(storage, None, [5, 9, 12])

        assert attempt.total_questions == 3
        assert attempt.finished_at is None
        assert [q.id for q in selected] == [5, 9, 12]

        payloads = [QuestionPublic.model_validate(q).model_dump() for q in selected]
        for payload in payloads:
            assert "answer" not in payload
            assert "explanation" not in payload

    def test_empty_question_list_rejected(self, storage, questions):
        with pytest.raises(InvalidInputError):
            quiz_service.start(storage, None, [])

    def test_duplicate_ids_rejected(self, storage, questions):
        with pytest.raises(InvalidInputError):
            quiz_service.start(storage, None, [1, 1])

    def test_unknown_question_rejected(self, storage, questions):
        with pytest.raises(NotFoundError):
            quiz_service.start(storage, None, [1, 999])


class TestSubmitAnswer:

    def test_correct_answer(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1, 2])

        feedback = quiz_service.submit_answer(storage, attempt.id, 1, 1, time_spent=4)

        assert feedback.correct is True
        assert feedback.correct_answer == 1
        assert feedback.explanation == "Basic arithmetic"
        [answer] = storage.list_answers(attempt.id)
        assert answer.correct is True
        assert answer.time_spent == 4

    @pytest.mark.parametrize("chosen", [0, 2, 7, -1])
    def test_wrong_answer(self, storage, questions, chosen):
        attempt, _ = quiz_service.start(storage, None, [1])

        feedback = quiz_service.submit_answer(storage, attempt.id, 1, chosen)

        assert feedback.correct is False
        assert feedback.correct_answer == 1
        assert storage.list_answers(attempt.id)[0].correct is False

    def test_resubmission_overwrites(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1, 2])

        quiz_service.submit_answer(storage, attempt.id, 1, 0)
        quiz_service.submit_answer(storage, attempt.id, 1, 1)

        answers = storage.list_answers(attempt.id)
        assert len(answers) == 1
        assert answers[0].correct is True
        assert len(answers) <= attempt.total_questions

    def test_negative_time_is_stored_as_zero(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1])

        quiz_service.submit_answer(storage, attempt.id, 1, 1, time_spent=-10)

        assert storage.list_answers(attempt.id)[0].time_spent == 0

    def test_question_outside_attempt_rejected(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1, 2])

        with pytest.raises(InvalidInputError):
            quiz_service.submit_answer(storage, attempt.id, 3, 1)

    def test_unknown_attempt(self, storage, questions):
        with pytest.raises(NotFoundError):
            quiz_service.submit_answer(storage, 404, 1, 1)

    def test_last_answer_finishes_attempt(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1, 2, 3])

        quiz_service.submit_answer(storage, attempt.id, 1, 1, time_spent=3)
        quiz_service.submit_answer(storage, attempt.id, 2, 0, time_spent=5)
        quiz_service.submit_answer(storage, attempt.id, 3, 1, time_spent=2, is_last=True)

        finished = storage.get_attempt(attempt.id)
        expected = score_answers(storage.list_answers(attempt.id), total_count=3)
        assert finished.finished_at is not None
        assert finished.score == expected.score == 67
        assert finished.time_spent == 10

    def test_finished_attempt_rejects_answers(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1])
        quiz_service.submit_answer(storage, attempt.id, 1, 1, is_last=True)

        with pytest.raises(InvalidInputError):
            quiz_service.submit_answer(storage, attempt.id, 1, 0)

    def test_guest_answers_do_not_touch_reviews(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1])

        quiz_service.submit_answer(storage, attempt.id, 1, 1)

        assert storage.list_user_stats(1) == []

    def test_user_answers_update_stats_and_reviews(self, storage, questions, user):
        attempt, _ = quiz_service.start(storage, user.id, [1, 2])

        quiz_service.submit_answer(storage, attempt.id, 1, 1, time_spent=4, caller_id=user.id)
        quiz_service.submit_answer(storage, attempt.id, 2, 0, time_spent=8, caller_id=user.id)

        [stats] = storage.list_user_stats(user.id)
        assert stats.total_attempts == 2
        assert stats.correct_answers == 1
        assert stats.avg_time_per_question == 6
        assert stats.streak == 0

        reviews = {r.question_id: r for r in storage.list_reviews(user.id)}
        assert reviews[1].consecutive == 1
        assert reviews[2].consecutive == 0
        assert reviews[2].interval == 1


class TestFinish:

    def test_finish_sets_all_fields_together(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1, 2])

        finished = quiz_service.finish(storage, attempt.id, 50, 30)

        assert finished.finished_at is not None
        assert finished.score == 50
        assert finished.time_spent == 30

    def test_double_finish_last_write_wins(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1, 2])

        quiz_service.finish(storage, attempt.id, 50, 30)
        quiz_service.finish(storage, attempt.id, 100, 40)

        finished = storage.get_attempt(attempt.id)
        assert finished.score == 100
        assert finished.time_spent == 40

    def test_finish_unknown_attempt(self, storage):
        with pytest.raises(NotFoundError):
            quiz_service.finish(storage, 404, 0, 0)

    def test_complete_counts_unanswered_as_wrong(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1, 2, 3, 4])
        quiz_service.submit_answer(storage, attempt.id, 1, 1)

        finished = quiz_service.complete(storage, attempt.id)

        assert finished.score == 25


class TestReview:

    def test_answer_key_hidden_until_answered(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1, 2])
        quiz_service.submit_answer(storage, attempt.id, 1, 0)

        _, entries = quiz_service.get_attempt_review(storage, attempt.id)

        assert entries[0]["chosen"] == 0
        assert entries[0]["correct"] is False
        assert entries[0]["answer"] == 1
        assert entries[1]["chosen"] is None
        assert entries[1]["answer"] is None
        assert entries[1]["explanation"] is None

    def test_answer_key_revealed_when_finished(self, storage, questions):
        attempt, _ = quiz_service.start(storage, None, [1, 2])
        quiz_service.complete(storage, attempt.id)

        _, entries = quiz_service.get_attempt_review(storage, attempt.id)

        assert [e["answer"] for e in entries] == [1, 1]

    def test_history_newest_first(self, storage, questions, user):
        first, _ = quiz_service.start(storage, user.id, [1])
        second, _ = quiz_service.start(storage, user.id, [2])
        quiz_service.start(storage, None, [3])

        history = quiz_service.list_attempts(storage, user.id)

        assert [a.id for a in history] == [second.id, first.id]


class TestOwnership:

    def test_guest_cannot_touch_user_attempt(self, storage, questions, user):
        attempt, _ = quiz_service.start(storage, user.id, [1, 2])

        with pytest.raises(ForbiddenError):
            quiz_service.submit_answer(storage, attempt.id, 1, 0, is_last=True)
        with pytest.raises(ForbiddenError):
            quiz_service.complete(storage, attempt.id, caller_id=user.id + 1)
        with pytest.raises(ForbiddenError):
            quiz_service.get_attempt_review(storage, attempt.id)

        assert storage.list_answers(attempt.id) == []
        assert storage.get_attempt(attempt.id).finished_at is None
        assert storage.list_user_stats(user.id) == []

    def test_guest_attempt_is_open(self, storage, questions, user):
        attempt, _ = quiz_service.start(storage, None, [1])

        feedback = quiz_service.submit_answer(storage, attempt.id, 1, 1, caller_id=user.id)

        assert feedback.correct is True
