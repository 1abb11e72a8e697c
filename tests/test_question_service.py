"""
Tests for question bank validation, immutability and import
"""
import pytest

from app.exceptions import InvalidInputError, NotFoundError
from app.services.question_service import question_service
from app.services.quiz_service import quiz_service


def _data(**overrides):
    data = {
        "question": "Which keyword defines a function in Python?",
        "options": ["func", "def", "lambda"],
        "answer": 1,
        "difficulty": "easy",
    }
    data.update(overrides)
    return data


class TestCreate:

    def test_creates_normalized_question(self, storage):
        question = question_service.create_question(storage, _data(question="  padded  "))

        assert question.id is not None
        assert question.question == "padded"
        assert question.options == ["func", "def", "lambda"]
        assert question.explanation is None

    @pytest.mark.parametrize("overrides", [
        {"options": []},
        {"options": "not a list"},
        {"question": ""},
        {"answer": 3},
        {"answer": -1},
        {"answer": True},
        {"difficulty": "extreme"},
    ])
    def test_rejects_invalid_input(self, storage, overrides):
        with pytest.raises(InvalidInputError):
            question_service.create_question(storage, _data(**overrides))

    def test_unknown_category(self, storage):
        with pytest.raises(NotFoundError):
            question_service.create_question(storage, _data(category=42))


class TestImmutability:

    def test_update_before_grading(self, storage):
        question = question_service.create_question(storage, _data())

        updated = question_service.update_question(storage, question.id, {"answer": 2})

        assert updated.answer == 2
        assert updated.options == ["func", "def", "lambda"]

    def test_update_validates_merged_record(self, storage):
        question = question_service.create_question(storage, _data())

        with pytest.raises(InvalidInputError):
            question_service.update_question(storage, question.id, {"options": ["only"]})

    def test_graded_question_is_frozen(self, storage):
        question = question_service.create_question(storage, _data())
        attempt, _ = quiz_service.start(storage, None, [question.id])
        quiz_service.submit_answer(storage, attempt.id, question.id, 1)

        with pytest.raises(InvalidInputError):
            question_service.update_question(storage, question.id, {"answer": 0})
        with pytest.raises(InvalidInputError):
            question_service.delete_question(storage, question.id)

        assert storage.get_question(question.id).answer == 1

    def test_delete_ungraded(self, storage):
        question = question_service.create_question(storage, _data())

        question_service.delete_question(storage, question.id)

        assert storage.get_question(question.id) is None

    def test_missing_question(self, storage):
        with pytest.raises(NotFoundError):
            question_service.update_question(storage, 99, {"answer": 0})


class TestImport:

    def test_skips_invalid_entries(self, storage):
        subject = storage.create_subject(name="Python")

        imported, skipped = question_service.import_questions(
            storage,
            [_data(), _data(options=[]), {"question": "missing fields"}, _data(difficulty=None)],
            subject_id=subject.id,
        )

        assert len(imported) == 2
        assert skipped == 2
        assert all(q.subject == subject.id for q in imported)
        assert imported[1].difficulty == "medium"

    def test_skips_entries_that_are_not_objects(self, storage):
        imported, skipped = question_service.import_questions(
            storage, ["bad", 42, None, ["a", "b"], _data()]
        )

        assert skipped == 4
        assert [q.question for q in imported] == [_data()["question"]]

    def test_unknown_subject(self, storage):
        with pytest.raises(NotFoundError):
            question_service.import_questions(storage, [_data()], subject_id=5)

    def test_empty_import(self, storage):
        with pytest.raises(InvalidInputError):
            question_service.import_questions(storage, [])


class TestList:

    def test_filters_and_hides_answers(self, storage):
        category = storage.create_category(name="Python", color="#3776ab")
        question_service.create_question(storage, _data(category=category.id))
        question_service.create_question(storage, _data(difficulty="hard"))

        by_category = question_service.list_questions(storage, category=category.id)
        by_difficulty = question_service.list_questions(storage, difficulty="hard")

        assert len(by_category) == 1
        assert len(by_difficulty) == 1
        assert "answer" not in by_category[0]
        assert "explanation" not in by_difficulty[0]

    def test_bad_difficulty_filter(self, storage):
        with pytest.raises(InvalidInputError):
            question_service.list_questions(storage, difficulty="trivial")
