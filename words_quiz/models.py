"""
models.py
======================

クイズで扱うデータモデル。

- VocabEntry: 単語 1 件 (不変)。同じ単語・意味でも id が違えば別物として扱う
- CardState: 単語ごとの回答状態 (エンジンが id → CardState の dict で保持)
- SessionSummary: セッション終了時の集計

品詞 (WordClass)・性 (Gender)・出題フェーズ (QuizPhase) は Literal で表現する。
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Literal, Optional

# ----------------------------------------------------------------------
#  列挙的な型
# ----------------------------------------------------------------------
WordClass = Literal["nouns", "verbs", "adjectives"]
Gender = Literal["masculine", "feminine", "neuter", "not_applicable"]
QuizPhase = Literal["meaning", "gender", "done"]
FeedbackKind = Literal["success", "error"]

WORD_CLASSES: tuple = ("nouns", "verbs", "adjectives")
WORD_CLASS_LABELS: Dict[str, str] = {
    "nouns": "Nouns",
    "verbs": "Verbs",
    "adjectives": "Adjectives",
}

# 性の質問で提示する選択肢（表示順）
GENDER_CHOICES: tuple = ("masculine", "feminine", "neuter")
NOT_APPLICABLE: str = "not_applicable"

# カテゴリの表示順
ALL_CATEGORIES: List[str] = [
    "Objects", "Food", "Family", "People", "Professions", "Time",
    "Weather", "Nature", "Places", "Transport", "School", "Abstract", "Home",
]


def _new_id() -> str:
    return uuid.uuid4().hex


# ----------------------------------------------------------------------
#  VocabEntry
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class VocabEntry:
    """
    単語 1 件。

    等価性・ハッシュは id のみで判定する（内容が同じでも別エントリ）。
    """

    word: str = field(compare=False)
    meaning: str = field(compare=False)
    gender: str = field(default=NOT_APPLICABLE, compare=False)
    categories: FrozenSet[str] = field(default_factory=frozenset, compare=False)
    id: str = field(default_factory=_new_id)

    @property
    def requires_gender(self) -> bool:
        """性の質問があるか（名詞のみ）。"""
        return self.gender != NOT_APPLICABLE

    @classmethod
    def from_dict(cls, data: Dict[str, Any], word_class: str = "nouns") -> "VocabEntry":
        """
        JSON の 1 レコードから生成する。

        - nouns: word / meaning / gender / categories
        - verbs, adjectives: word / meaning / categories（gender は not_applicable）

        必須項目が欠けている・型が違う場合は ValueError。
        """
        if not isinstance(data, dict):
            raise ValueError(f"レコードが object ではありません: {data!r}")

        word = data.get("word")
        meaning = data.get("meaning")
        if not isinstance(word, str) or not word.strip():
            raise ValueError(f"word がありません: {data!r}")
        if not isinstance(meaning, str) or not meaning.strip():
            raise ValueError(f"meaning がありません: {data!r}")

        raw_categories = data.get("categories") or []
        if not isinstance(raw_categories, list):
            raise ValueError(f"categories が配列ではありません: {data!r}")
        categories = frozenset(
            c.strip() for c in raw_categories if isinstance(c, str) and c.strip()
        )

        if word_class == "nouns":
            gender = str(data.get("gender", "")).strip().lower()
            if gender not in GENDER_CHOICES:
                raise ValueError(f"gender が不正です: {data!r}")
        else:
            gender = NOT_APPLICABLE

        return cls(
            word=word.strip(),
            meaning=meaning.strip(),
            gender=gender,
            categories=categories,
        )


# ----------------------------------------------------------------------
#  CardState
# ----------------------------------------------------------------------
@dataclass
class CardState:
    """
    単語ごとの回答状態。

    score_granted_* は「その小問の得点はエントリごとに 1 回だけ」を保証するフラグ。
    戻る操作で再訪しても再加点されない。
    """

    selected_meaning: Optional[str] = None
    selected_gender: Optional[str] = None
    meaning_correct: Optional[bool] = None
    gender_correct: Optional[bool] = None
    phase: str = "meaning"
    score_granted_meaning: bool = False
    score_granted_gender: bool = False


# ----------------------------------------------------------------------
#  SessionSummary
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class SessionSummary:
    """セッション終了画面用の集計値。"""

    total_asked: int
    missed_items: List[VocabEntry]
    score: float

    @property
    def missed_count(self) -> int:
        return len(self.missed_items)

    @property
    def correct_count(self) -> int:
        return max(0, self.total_asked - self.missed_count)

    @property
    def accuracy_percent(self) -> int:
        """正答率 (%)。出題 0 件なら 0。小数点以下は四捨五入。"""
        if self.total_asked <= 0:
            return 0
        ratio = 100.0 * self.correct_count / self.total_asked
        # round() は偶数丸めなので使わない
        return int(ratio + 0.5)
