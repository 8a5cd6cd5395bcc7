import json
import os
import random
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from words_quiz import vocabulary
from words_quiz.engine import QuizSession
from words_quiz.feedback import RecordingFeedback
from words_quiz.models import VocabEntry
from words_quiz.settings import QuizSettings, SettingsStore


def make_entry(word, meaning, gender="not_applicable", categories=()):
    return VocabEntry(word=word, meaning=meaning, gender=gender, categories=frozenset(categories))


@pytest.fixture(autouse=True)
def _clear_vocabulary_cache():
    vocabulary.clear_cache()
    yield
    vocabulary.clear_cache()


@pytest.fixture
def table_entry():
    return make_entry("стіл", "table", "masculine", ["Objects", "Home"])


@pytest.fixture
def noun_entries(table_entry):
    return [
        table_entry,
        make_entry("книга", "book", "feminine", ["Objects", "School"]),
        make_entry("вікно", "window", "neuter", ["Home"]),
    ]


@pytest.fixture
def verb_entries():
    return [
        make_entry("читати", "to read", categories=["School"]),
        make_entry("їсти", "to eat", categories=["Food"]),
        make_entry("пити", "to drink", categories=["Food"]),
    ]


@pytest.fixture
def feedback():
    return RecordingFeedback()


@pytest.fixture
def settings_store(tmp_path):
    store = SettingsStore(tmp_path / "settings.json")
    store.load()
    return store


@pytest.fixture
def make_session(feedback):
    """順序を固定した (shuffle なし・件数無制限) セッションを作る。"""

    def _make(entries, store=None, **overrides):
        values = {"shuffle_enabled": False, "session_length": 0}
        values.update(overrides)
        settings = QuizSettings().with_changes(**values)
        return QuizSession(
            settings=settings,
            store=store,
            feedback=feedback,
            rng=random.Random(1234),
            full_deck=entries,
        )

    return _make


@pytest.fixture
def vocabulary_file(tmp_path):
    data = {
        "nouns": [
            {"word": "стіл", "meaning": "table", "gender": "masculine", "categories": ["Objects"]},
            {"word": "книга", "meaning": "book", "gender": "Feminine", "categories": ["School"]},
            {"word": "broken", "gender": "neuter", "categories": []},
            {"word": "море", "meaning": "sea", "gender": "plural", "categories": []},
        ],
        "verbs": [
            {"word": "читати", "meaning": "to read", "categories": ["School"]},
            "not an object",
        ],
        "adjectives": [
            {"word": "великий", "meaning": "big"},
        ],
    }
    path = tmp_path / "vocabulary.json"
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path
