import pytest

from words_quiz.config import DATA_DIR, ENV_SETTINGS, ENV_VOCABULARY, ROOT_DIR, AppConfig


@pytest.fixture(autouse=True)
def _no_env(monkeypatch):
    monkeypatch.delenv(ENV_VOCABULARY, raising=False)
    monkeypatch.delenv(ENV_SETTINGS, raising=False)


def test_defaults_without_toml(tmp_path):
    cfg = AppConfig(config_toml_path=tmp_path / "missing.toml")
    assert cfg.vocabulary_path == DATA_DIR / "ukrainian_vocabulary.json"
    assert cfg.settings_path == DATA_DIR / "settings.json"
    assert cfg.language == "uk-UA"
    assert cfg.raw == {}


def test_toml_overrides_paths_and_app(tmp_path):
    toml_path = tmp_path / "config.toml"
    toml_path.write_text(
        '[app]\nname = "Слова"\nlanguage = "uk"\n\n'
        '[paths]\nvocabulary = "custom/words.json"\nsettings = "%s"\n'
        % (tmp_path / "s.json").as_posix(),
        encoding="utf-8",
    )
    cfg = AppConfig(config_toml_path=toml_path)
    assert cfg.app_name == "Слова"
    assert cfg.language == "uk"
    assert cfg.vocabulary_path == ROOT_DIR / "custom" / "words.json"
    assert cfg.settings_path == tmp_path / "s.json"


def test_broken_toml_is_ignored(tmp_path):
    toml_path = tmp_path / "config.toml"
    toml_path.write_text("[app\nname = ", encoding="utf-8")
    cfg = AppConfig(config_toml_path=toml_path)
    assert cfg.raw == {}
    assert cfg.app_name == "Ukrainian Words"


def test_environment_wins_over_toml(tmp_path, monkeypatch):
    toml_path = tmp_path / "config.toml"
    toml_path.write_text('[paths]\nvocabulary = "from_toml.json"\n', encoding="utf-8")
    monkeypatch.setenv(ENV_VOCABULARY, str(tmp_path / "from_env.json"))
    monkeypatch.setenv(ENV_SETTINGS, str(tmp_path / "settings.json"))

    cfg = AppConfig(config_toml_path=toml_path)
    assert cfg.vocabulary_path == tmp_path / "from_env.json"
    assert cfg.settings_path == tmp_path / "settings.json"


def test_write_json_then_read_json(tmp_path):
    path = tmp_path / "nested" / "data.json"
    assert AppConfig.read_json(path) is None
    AppConfig.write_json(path, {"b": 1, "a": "ї"})
    assert AppConfig.read_json(path) == {"a": "ї", "b": 1}
    assert not path.with_suffix(".json.tmp").exists()
