"""
Tests for startup seeding
"""
import asyncio
import json

from app.services.seed_service import DEFAULT_CATEGORIES, DEFAULT_SUBJECTS, seed_service


def test_defaults_are_seeded_once(storage):
    seed_service.seed_defaults(storage)
    seed_service.seed_defaults(storage)

    assert len(storage.list_categories()) == len(DEFAULT_CATEGORIES)
    assert len(storage.list_subjects()) == len(DEFAULT_SUBJECTS)


def test_questions_from_file(storage, tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps([
        {"question": "2 + 2?", "options": ["3", "4"], "answer": 1},
        {"question": "broken", "options": []},
    ]))

    count = asyncio.run(seed_service.seed_questions(storage, str(path)))

    assert count == 1
    assert storage.list_questions()[0].difficulty == "medium"

    # A non-empty bank is left alone
    assert asyncio.run(seed_service.seed_questions(storage, str(path))) == 0


def test_missing_file_is_ignored(storage, tmp_path):
    count = asyncio.run(seed_service.seed_questions(storage, str(tmp_path / "nope.json")))

    assert count == 0


def test_malformed_entries_do_not_stop_seeding(storage, tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps([
        "not a question",
        7,
        {"question": "2 + 2?", "options": ["3", "4"], "answer": 1},
    ]))

    count = asyncio.run(seed_service.seed_questions(storage, str(path)))

    assert count == 1
