"""
vocabulary.py
===========================

単語データ (JSON) を読み込み、品詞ごとの VocabEntry リストを返すモジュール。

ファイル形式:

{
  "nouns":      [{"word": "стіл", "meaning": "table", "gender": "masculine", "categories": ["Objects"]}, ...],
  "verbs":      [{"word": "читати", "meaning": "to read", "categories": ["School"]}, ...],
  "adjectives": [{"word": "великий", "meaning": "big", "categories": []}, ...]
}

目的:
- 壊れたレコードへの耐性（壊れている行は skip してログに残す）
- VocabEntry モデルとの型整合性
- 多回ロード時の高速化（パスごとのウォームキャッシュ）

ファイルそのものが無い・JSON として読めない場合は VocabularyLoadError を送出する。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import AppConfig
from .errors import VocabularyLoadError
from .models import WORD_CLASSES, VocabEntry

log = logging.getLogger(__name__)

# ----------------------------------------------------------------------
#  グローバルキャッシュ（Pythonプロセス中は維持される）
# ----------------------------------------------------------------------
_VOCAB_CACHE: Dict[Path, Dict[str, List[VocabEntry]]] = {}

PathLike = Union[str, Path]


# ----------------------------------------------------------------------
#  JSON 読み込み
# ----------------------------------------------------------------------
def load_vocabulary(
    path: Optional[PathLike] = None,
    force_reload: bool = False,
) -> Dict[str, List[VocabEntry]]:
    """
    単語ファイルを読み込み、品詞 → VocabEntry リストの辞書を返す。

    - force_reload=True の場合のみ再読込
    - 壊れたレコードは warning を出してスキップ
    - 品詞の配列が無い場合は空リスト扱い
    """
    vocab_path = Path(path) if path is not None else AppConfig().vocabulary_path
    key = vocab_path.resolve()

    if key in _VOCAB_CACHE and not force_reload:
        return _VOCAB_CACHE[key]

    if not vocab_path.exists():
        raise VocabularyLoadError(vocab_path, "ファイルが見つかりません")

    try:
        with vocab_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise VocabularyLoadError(vocab_path, str(e)) from e

    if not isinstance(data, dict):
        raise VocabularyLoadError(vocab_path, "トップレベルが object ではありません")

    result: Dict[str, List[VocabEntry]] = {}
    for word_class in WORD_CLASSES:
        result[word_class] = _parse_records(data.get(word_class), word_class, vocab_path)

    log.info(
        "単語データを読み込みました: %s (nouns=%d, verbs=%d, adjectives=%d)",
        vocab_path.name,
        len(result["nouns"]),
        len(result["verbs"]),
        len(result["adjectives"]),
    )

    _VOCAB_CACHE[key] = result
    return result


def _parse_records(records: Any, word_class: str, path: Path) -> List[VocabEntry]:
    if records is None:
        return []
    if not isinstance(records, list):
        log.warning("%s の %s が配列ではないため無視します", path.name, word_class)
        return []

    entries: List[VocabEntry] = []
    for i, record in enumerate(records):
        try:
            entries.append(VocabEntry.from_dict(record, word_class))
        except ValueError as e:
            # 壊れたレコードは無視する
            log.warning("%s[%d] をスキップ: %s", word_class, i, e)
            continue
    return entries


def clear_cache() -> None:
    """キャッシュを破棄する（テスト・再読込用）。"""
    _VOCAB_CACHE.clear()


# ----------------------------------------------------------------------
#  単純ヘルパー
# ----------------------------------------------------------------------
def get_entries(word_class: str, path: Optional[PathLike] = None) -> List[VocabEntry]:
    """品詞を指定して単語リストを返す。"""
    if word_class not in WORD_CLASSES:
        raise ValueError(f"未知の品詞です: {word_class}")
    return list(load_vocabulary(path)[word_class])


def categories_in(entries: List[VocabEntry]) -> List[str]:
    """エントリ群に含まれるカテゴリ名（ソート済み）"""
    found = set()
    for e in entries:
        found.update(e.categories)
    return sorted(found)


# ----------------------------------------------------------------------
#  VocabularySource
# ----------------------------------------------------------------------
class VocabularySource:
    """
    エンジンから見た単語データの取得口。

    パスを保持し、load(word_class) で品詞ごとのリストを返すだけの薄いラッパー。
    テストではこのクラスの代わりに load() を持つ任意のオブジェクトを渡せる。
    """

    def __init__(self, path: Optional[PathLike] = None):
        self.path = Path(path) if path is not None else AppConfig().vocabulary_path

    def load(self, word_class: str, force_reload: bool = False) -> List[VocabEntry]:
        if word_class not in WORD_CLASSES:
            raise ValueError(f"未知の品詞です: {word_class}")
        return list(load_vocabulary(self.path, force_reload=force_reload)[word_class])
