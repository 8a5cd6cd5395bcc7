import json

import pytest

from words_quiz.errors import SettingsError
from words_quiz.settings import DEFAULTS, QuizSettings, SettingsStore


def test_fresh_store_returns_defaults(settings_store):
    for key, default in DEFAULTS.items():
        assert settings_store.get(key) == default
    assert settings_store.get("session_length") == 20
    assert settings_store.get("speech_rate") == 0.5


def test_set_writes_through_and_survives_reload(settings_store):
    settings_store.set("session_length", 50)
    settings_store.set("active_categories", ["Time", "Food", "Time"])

    raw = json.loads(settings_store.path.read_text(encoding="utf-8"))
    assert raw["values"]["session_length"] == 50

    reopened = SettingsStore(settings_store.path)
    reopened.load()
    assert reopened.get("session_length") == 50
    assert reopened.get("active_categories") == ["Food", "Time"]


def test_unknown_key_is_rejected(settings_store):
    with pytest.raises(SettingsError):
        settings_store.get("volume")
    with pytest.raises(SettingsError):
        settings_store.set("volume", 3)


@pytest.mark.parametrize(
    "key, value",
    [
        ("session_length", 15),
        ("session_length", True),
        ("haptics_enabled", "yes"),
        ("word_class", "adverbs"),
        ("active_categories", "Food"),
        ("speech_rate", "fast"),
    ],
)
def test_invalid_values_are_rejected(settings_store, key, value):
    before = settings_store.get(key)
    with pytest.raises(SettingsError):
        settings_store.set(key, value)
    assert settings_store.get(key) == before


def test_speech_rate_is_clamped(settings_store):
    settings_store.set("speech_rate", 1.5)
    assert settings_store.get("speech_rate") == 0.9
    settings_store.set("speech_rate", 0)
    assert settings_store.get("speech_rate") == 0.2


def test_invalid_stored_value_falls_back_to_default(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"version": 1, "values": {"session_length": 7, "dark_mode_enabled": True}}),
        encoding="utf-8",
    )
    store = SettingsStore(path)
    store.load()
    assert store.get("session_length") == 20
    assert store.get("dark_mode_enabled") is True


def test_corrupt_file_is_treated_as_empty(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    store = SettingsStore(path)
    store.load()
    assert store.get("shuffle_enabled") is True
    store.set("shuffle_enabled", False)
    assert json.loads(path.read_text(encoding="utf-8"))["values"]["shuffle_enabled"] is False


def test_update_saves_several_values(settings_store):
    settings_store.update(dark_mode_enabled=True, word_class="verbs")
    reopened = SettingsStore(settings_store.path)
    reopened.load()
    assert reopened.get("dark_mode_enabled") is True
    assert reopened.get("word_class") == "verbs"


def test_as_settings_snapshot(settings_store):
    settings_store.set("active_categories", ["Home"])
    settings = settings_store.as_settings()
    assert isinstance(settings, QuizSettings)
    assert settings.active_categories == frozenset({"Home"})
    assert settings.word_class == "nouns"


def test_with_changes_validates():
    settings = QuizSettings().with_changes(speech_rate=0.1, active_categories=["Food"])
    assert settings.speech_rate == 0.2
    assert settings.active_categories == frozenset({"Food"})
    with pytest.raises(SettingsError):
        QuizSettings().with_changes(session_length=30)
