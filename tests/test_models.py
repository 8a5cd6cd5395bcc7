import pytest

from conftest import make_entry
from words_quiz.feedback import speech_rate_to_voice_rate
from words_quiz.models import SessionSummary, VocabEntry


def test_entries_compare_by_id_only():
    a = make_entry("стіл", "table", "masculine")
    b = make_entry("стіл", "table", "masculine")
    assert a != b
    assert len({a, b}) == 2


def test_from_dict_normalizes_noun_gender():
    entry = VocabEntry.from_dict(
        {"word": " хліб ", "meaning": "bread", "gender": "MASCULINE", "categories": ["Food", ""]},
        "nouns",
    )
    assert entry.word == "хліб"
    assert entry.gender == "masculine"
    assert entry.categories == frozenset({"Food"})


@pytest.mark.parametrize(
    "record",
    [
        {"word": "стіл", "gender": "masculine"},
        {"word": "", "meaning": "table", "gender": "masculine"},
        {"word": "стіл", "meaning": "table"},
        {"word": "стіл", "meaning": "table", "gender": "masculine", "categories": "Home"},
        "стіл",
    ],
)
def test_from_dict_rejects_broken_noun_records(record):
    with pytest.raises(ValueError):
        VocabEntry.from_dict(record, "nouns")


def test_from_dict_ignores_gender_for_verbs():
    entry = VocabEntry.from_dict({"word": "пити", "meaning": "to drink", "gender": "feminine"}, "verbs")
    assert entry.gender == "not_applicable"


@pytest.mark.parametrize(
    "total, missed, expected",
    [
        (0, 0, 0),
        (1, 1, 0),
        (4, 1, 75),
        (3, 1, 67),
        (8, 1, 88),
        (200, 1, 100),
        (200, 199, 1),
        (1, 2, 0),
    ],
)
def test_accuracy_percent(total, missed, expected):
    summary = SessionSummary(
        total_asked=total,
        missed_items=[make_entry(f"w{i}", "m") for i in range(missed)],
        score=0.0,
    )
    assert summary.accuracy_percent == expected


def test_correct_count_never_negative():
    summary = SessionSummary(total_asked=0, missed_items=[make_entry("a", "b")], score=0.0)
    assert summary.correct_count == 0


@pytest.mark.parametrize(
    "slider, expected",
    [(0.5, 1.0), (0.2, 0.4), (0.9, 1.8), (0.0, 0.1), (1.5, 2.0)],
)
def test_speech_rate_to_voice_rate(slider, expected):
    assert speech_rate_to_voice_rate(slider) == pytest.approx(expected)
