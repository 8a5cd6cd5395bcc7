"""
deck.py
===========================

出題デッキの組み立てと、意味の選択肢生成。

どちらも副作用の無い関数で、乱数は呼び出し側から random.Random を渡せる
（テストでは seed 固定の Random を渡す）。
"""

from __future__ import annotations

import random
from typing import Iterable, List, Optional

from .models import VocabEntry

MEANING_OPTION_COUNT = 4


# ----------------------------------------------------------------------
#  working deck の組み立て
# ----------------------------------------------------------------------
def filter_by_categories(
    entries: Iterable[VocabEntry],
    active_categories: Iterable[str],
) -> List[VocabEntry]:
    """
    カテゴリで絞り込む。

    - active_categories が空なら絞り込みなし
    - それ以外はカテゴリが 1 つでも重なるエントリだけ残す
      （カテゴリを持たないエントリは必ず除外される）
    """
    selected = set(active_categories)
    if not selected:
        return list(entries)
    return [e for e in entries if e.categories and not selected.isdisjoint(e.categories)]


def build_working_deck(
    full_deck: Iterable[VocabEntry],
    active_categories: Iterable[str],
    shuffle: bool,
    session_length: int,
    rng: Optional[random.Random] = None,
) -> List[VocabEntry]:
    """
    full deck から実際に出題する working deck を作る。

    1. カテゴリで絞り込み
    2. shuffle=True なら一様ランダムに並べ替え（False なら元の順序）
    3. session_length > 0 なら先頭からその件数に切り詰め（0 は無制限）

    シャッフル後に切り詰めるので、shuffle=True のときはランダム抽出になる。
    """
    deck = filter_by_categories(full_deck, active_categories)

    if shuffle:
        (rng or random).shuffle(deck)

    if session_length > 0 and len(deck) > session_length:
        deck = deck[:session_length]
    return deck


# ----------------------------------------------------------------------
#  意味の選択肢
# ----------------------------------------------------------------------
def make_meaning_options(
    current: Optional[VocabEntry],
    working_deck: List[VocabEntry],
    limit: int = MEANING_OPTION_COUNT,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """
    正解の意味を含む最大 limit 個の選択肢を返す。

    working deck をシャッフルしたプールから重複なしで引き、
    正解と異なる意味を集める。意味の種類が足りない場合は limit 未満になる。
    """
    if current is None:
        return []

    r = rng or random
    options = [current.meaning]
    pool = list(working_deck)
    r.shuffle(pool)

    while len(options) < limit and pool:
        candidate = pool.pop()
        if candidate.meaning != current.meaning and candidate.meaning not in options:
            options.append(candidate.meaning)

    r.shuffle(options)
    return options
