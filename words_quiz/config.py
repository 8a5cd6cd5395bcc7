"""
config.py
=========

アプリ全体で利用する設定値（主にファイルパス）を一元管理する。
単語データ・設定ストア・config.toml の場所はすべてこのクラスを通じて取得する。

本ファイルは app.py と tools/check_vocabulary.py の共通設定でもある。

優先順位:
1. 環境変数 (WORDS_QUIZ_VOCABULARY / WORDS_QUIZ_SETTINGS)
2. config.toml の [paths]
3. 既定値 (data/ 配下)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import toml

log = logging.getLogger(__name__)


# ------------------------------------------------------------
# 基本パス定義
# ------------------------------------------------------------

ROOT_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = ROOT_DIR / "data"

ENV_VOCABULARY = "WORDS_QUIZ_VOCABULARY"
ENV_SETTINGS = "WORDS_QUIZ_SETTINGS"


# ------------------------------------------------------------
# AppConfig
# ------------------------------------------------------------

@dataclass
class AppConfig:
    """
    アプリ設定クラス。

    - 単語データ (JSON) のパス
    - 設定ストア (JSON) のパス
    - config.toml の [app] 情報（アプリ名・言語）
    """

    # ---------- ファイルパス ----------
    vocabulary_path: Path = DATA_DIR / "ukrainian_vocabulary.json"
    settings_path: Path = DATA_DIR / "settings.json"
    config_toml_path: Path = ROOT_DIR / "config.toml"

    # ---------- アプリ情報 ----------
    app_name: str = "Ukrainian Words"
    language: str = "uk-UA"

    raw: Dict[str, Any] = field(default_factory=dict)

    # ============================================================
    # 初期化処理
    # ============================================================

    def __post_init__(self):
        self.vocabulary_path = Path(self.vocabulary_path)
        self.settings_path = Path(self.settings_path)
        self.config_toml_path = Path(self.config_toml_path)

        self.raw = self._load_toml(self.config_toml_path)
        self._apply_toml(self.raw)
        self._apply_env()

    # ============================================================
    # 内部関数
    # ============================================================

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        """config.toml を読む。無い・壊れている場合は空 dict。"""
        if not path.exists():
            return {}
        try:
            return toml.load(str(path))
        except (toml.TomlDecodeError, OSError):
            log.warning("config.toml を読み込めませんでした: %s", path, exc_info=True)
            return {}

    def _apply_toml(self, cfg: Dict[str, Any]) -> None:
        paths = cfg.get("paths")
        if isinstance(paths, dict):
            vocab = paths.get("vocabulary")
            if isinstance(vocab, str) and vocab:
                self.vocabulary_path = self._resolve(vocab)
            settings = paths.get("settings")
            if isinstance(settings, str) and settings:
                self.settings_path = self._resolve(settings)

        app = cfg.get("app")
        if isinstance(app, dict):
            name = app.get("name")
            if isinstance(name, str) and name:
                self.app_name = name
            language = app.get("language")
            if isinstance(language, str) and language:
                self.language = language

    def _apply_env(self) -> None:
        vocab = os.environ.get(ENV_VOCABULARY)
        if vocab:
            self.vocabulary_path = self._resolve(vocab)
        settings = os.environ.get(ENV_SETTINGS)
        if settings:
            self.settings_path = self._resolve(settings)

    @staticmethod
    def _resolve(value: str) -> Path:
        """相対パスはリポジトリのルート基準で解釈する。"""
        p = Path(value).expanduser()
        return p if p.is_absolute() else ROOT_DIR / p

    # ============================================================
    # JSON 読み取りユーティリティ
    # ============================================================

    @staticmethod
    def read_json(path: Path) -> Optional[Any]:
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def write_json(path: Path, data: Any) -> None:
        """一時ファイルに書いてから置き換える（途中で落ちても壊れないように）。"""
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True),
            encoding="utf-8",
        )
        os.replace(tmp_path, path)
