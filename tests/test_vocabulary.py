import json

import pytest

from words_quiz.config import DATA_DIR
from words_quiz.errors import VocabularyLoadError
from words_quiz.models import ALL_CATEGORIES, NOT_APPLICABLE
from words_quiz.vocabulary import (
    VocabularySource,
    categories_in,
    get_entries,
    load_vocabulary,
)


def test_load_skips_broken_records(vocabulary_file):
    vocab = load_vocabulary(vocabulary_file)

    nouns = vocab["nouns"]
    assert [e.word for e in nouns] == ["стіл", "книга"]
    assert nouns[1].gender == "feminine"
    assert all(e.requires_gender for e in nouns)

    assert [e.word for e in vocab["verbs"]] == ["читати"]
    assert vocab["verbs"][0].gender == NOT_APPLICABLE
    assert not vocab["verbs"][0].requires_gender

    adjectives = vocab["adjectives"]
    assert len(adjectives) == 1
    assert adjectives[0].categories == frozenset()


def test_entries_get_distinct_ids(vocabulary_file):
    nouns = load_vocabulary(vocabulary_file)["nouns"]
    assert len({e.id for e in nouns}) == len(nouns)


def test_missing_word_class_is_empty(tmp_path):
    path = tmp_path / "only_nouns.json"
    path.write_text(json.dumps({"nouns": [], "verbs": "oops"}), encoding="utf-8")
    vocab = load_vocabulary(path)
    assert vocab == {"nouns": [], "verbs": [], "adjectives": []}


def test_missing_file_raises(tmp_path):
    with pytest.raises(VocabularyLoadError) as exc_info:
        load_vocabulary(tmp_path / "nothing.json")
    assert exc_info.value.path == tmp_path / "nothing.json"


@pytest.mark.parametrize("content", ["{broken", "[1, 2, 3]"])
def test_unreadable_file_raises(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(VocabularyLoadError):
        load_vocabulary(path)


def test_cache_and_force_reload(vocabulary_file):
    first = load_vocabulary(vocabulary_file)
    assert load_vocabulary(vocabulary_file) is first

    vocabulary_file.write_text(json.dumps({"nouns": []}), encoding="utf-8")
    assert load_vocabulary(vocabulary_file) is first
    reloaded = load_vocabulary(vocabulary_file, force_reload=True)
    assert reloaded["nouns"] == []


def test_source_returns_a_copy(vocabulary_file):
    source = VocabularySource(vocabulary_file)
    nouns = source.load("nouns")
    nouns.clear()
    assert len(source.load("nouns")) == 2
    with pytest.raises(ValueError):
        source.load("adverbs")


def test_helpers(vocabulary_file):
    entries = get_entries("nouns", vocabulary_file)
    assert categories_in(entries) == ["Objects", "School"]


def test_bundled_vocabulary_is_valid():
    vocab = load_vocabulary(DATA_DIR / "ukrainian_vocabulary.json")
    assert len(vocab["nouns"]) == 25
    assert len(vocab["verbs"]) == 10
    assert len(vocab["adjectives"]) == 10
    for entries in vocab.values():
        assert set(categories_in(entries)) <= set(ALL_CATEGORIES)
