"""
settings.py
======================

data/settings.json の読み書きと、クイズ設定 (QuizSettings) の組み立てを扱うモジュール。

settings.json の想定構造:

{
  "version": 1,
  "updated_at": "1970-01-01T00:00:00Z",
  "values": {
    "haptics_enabled": true,
    "shuffle_enabled": true,
    "session_length": 20,
    "speech_enabled": true,
    "speech_rate": 0.5,
    "answer_sounds_enabled": true,
    "show_instructions": true,
    "has_seen_welcome": false,
    "dark_mode_enabled": false,
    "word_class": "nouns",
    "active_categories": []
  }
}

set() のたびに即座にファイルへ書き出す（write-through）。
トランザクションは不要で、最後に書けた内容が残ればよい。
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Optional

from .config import AppConfig
from .errors import SettingsError
from .models import WORD_CLASSES

log = logging.getLogger(__name__)

SESSION_LENGTHS: tuple = (0, 10, 20, 50)
SPEECH_RATE_MIN = 0.2
SPEECH_RATE_MAX = 0.9

DEFAULTS: Dict[str, Any] = {
    "haptics_enabled": True,
    "shuffle_enabled": True,
    "session_length": 20,
    "speech_enabled": True,
    "speech_rate": 0.5,
    "answer_sounds_enabled": True,
    "show_instructions": True,
    "has_seen_welcome": False,
    "dark_mode_enabled": False,
    "word_class": "nouns",
    "active_categories": [],
}


# ----------------------------------------------------------------------
#  値の検証・正規化
# ----------------------------------------------------------------------
def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"bool ではありません: {value!r}")


def _as_session_length(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value not in SESSION_LENGTHS:
        raise ValueError(f"session_length は {SESSION_LENGTHS} のいずれか: {value!r}")
    return value


def _as_speech_rate(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"speech_rate は数値: {value!r}")
    return min(max(float(value), SPEECH_RATE_MIN), SPEECH_RATE_MAX)


def _as_word_class(value: Any) -> str:
    if value not in WORD_CLASSES:
        raise ValueError(f"word_class は {WORD_CLASSES} のいずれか: {value!r}")
    return value


def _as_categories(value: Any) -> list:
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(f"active_categories は配列: {value!r}")
    if not all(isinstance(c, str) for c in value):
        raise ValueError(f"active_categories は文字列の配列: {value!r}")
    return sorted(set(value))


VALIDATORS: Dict[str, Callable[[Any], Any]] = {
    "haptics_enabled": _as_bool,
    "shuffle_enabled": _as_bool,
    "session_length": _as_session_length,
    "speech_enabled": _as_bool,
    "speech_rate": _as_speech_rate,
    "answer_sounds_enabled": _as_bool,
    "show_instructions": _as_bool,
    "has_seen_welcome": _as_bool,
    "dark_mode_enabled": _as_bool,
    "word_class": _as_word_class,
    "active_categories": _as_categories,
}


# ----------------------------------------------------------------------
#  QuizSettings
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class QuizSettings:
    """
    エンジンに明示的に渡す設定オブジェクト。

    ストアの内容のスナップショットで、変更はストア経由で行い
    as_settings() で作り直す。
    """

    haptics_enabled: bool = True
    shuffle_enabled: bool = True
    session_length: int = 20
    speech_enabled: bool = True
    speech_rate: float = 0.5
    answer_sounds_enabled: bool = True
    show_instructions: bool = True
    has_seen_welcome: bool = False
    dark_mode_enabled: bool = False
    word_class: str = "nouns"
    active_categories: FrozenSet[str] = field(default_factory=frozenset)

    def with_changes(self, **changes: Any) -> "QuizSettings":
        """検証済みの値で差し替えたコピーを返す。"""
        clean: Dict[str, Any] = {}
        for key, value in changes.items():
            clean_value = validate(key, value)
            if key == "active_categories":
                clean_value = frozenset(clean_value)
            clean[key] = clean_value
        return replace(self, **clean)


def validate(key: str, value: Any) -> Any:
    """キーと値を検証し、正規化した値を返す。不正なら SettingsError。"""
    validator = VALIDATORS.get(key)
    if validator is None:
        raise SettingsError(f"未知の設定キーです: {key}")
    try:
        return validator(value)
    except ValueError as e:
        raise SettingsError(str(e)) from e


# ----------------------------------------------------------------------
#  SettingsStore
# ----------------------------------------------------------------------
class SettingsStore:
    """
    data/settings.json を扱う永続 key/value ストア。

    主な責務:
    - settings.json のロード／セーブ
    - 既定値の補完と、不正な保存値の既定値への置き換え
    - set() 時の検証と write-through
    """

    def __init__(self, path: Optional[Path] = None, config: Optional[AppConfig] = None):
        if path is None:
            path = (config or AppConfig()).settings_path
        self.path = Path(path)
        self.data: Dict[str, Any] = {}

    # ------------------------------------------------------------------
    # ロード / セーブ
    # ------------------------------------------------------------------
    def load(self) -> None:
        """settings.json を読み込む。存在しない・壊れている場合は既定値で初期化。"""
        raw: Any = None
        if self.path.exists():
            try:
                raw = AppConfig.read_json(self.path)
            except (OSError, UnicodeDecodeError, json.JSONDecodeError):
                log.warning("設定ファイルが壊れているため既定値を使います: %s", self.path, exc_info=True)
                raw = None

        if not isinstance(raw, dict):
            raw = {}
        self.data = raw

        # 足りないキーを安全に補完
        self._ensure_structure()

    def save(self) -> None:
        """settings.json を保存する。更新日時を自動で進める。"""
        if not self.data:
            self._ensure_structure()
        self.data["updated_at"] = _now_iso()
        AppConfig.write_json(self.path, self.data)

    # ------------------------------------------------------------------
    # 内部構造の補完
    # ------------------------------------------------------------------
    def _ensure_structure(self) -> None:
        """必要なキーが必ず存在し、値が検証を通るように補完する。"""
        d = self.data
        d.setdefault("version", 1)
        d.setdefault("updated_at", _now_iso())
        if not isinstance(d.get("values"), dict):
            d["values"] = {}

        values = d["values"]
        for key, default in DEFAULTS.items():
            if key not in values:
                values[key] = list(default) if isinstance(default, list) else default
                continue
            try:
                values[key] = VALIDATORS[key](values[key])
            except ValueError:
                log.warning("設定値 %s=%r が不正なため既定値 %r に戻します", key, values[key], default)
                values[key] = list(default) if isinstance(default, list) else default

    # ------------------------------------------------------------------
    # 値の取得・更新
    # ------------------------------------------------------------------
    def get(self, key: str) -> Any:
        if key not in DEFAULTS:
            raise SettingsError(f"未知の設定キーです: {key}")
        if not self.data:
            self._ensure_structure()
        return self.data["values"][key]

    def set(self, key: str, value: Any) -> None:
        """値を検証して更新し、即座に保存する。"""
        clean = validate(key, value)
        if not self.data:
            self._ensure_structure()
        self.data["values"][key] = clean
        self.save()

    def update(self, **changes: Any) -> None:
        """複数の値をまとめて更新する（保存は 1 回）。"""
        clean = {key: validate(key, value) for key, value in changes.items()}
        if not self.data:
            self._ensure_structure()
        self.data["values"].update(clean)
        self.save()

    def as_settings(self) -> QuizSettings:
        """現在の値から QuizSettings を作る。"""
        if not self.data:
            self._ensure_structure()
        values = dict(self.data["values"])
        values["active_categories"] = frozenset(values.get("active_categories") or [])
        return QuizSettings(**{k: values[k] for k in DEFAULTS})


# ----------------------------------------------------------------------
# ユーティリティ
# ----------------------------------------------------------------------
def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
