"""
history.py
=====================================

「ひとつ前に戻る」ための履歴スタックを担当するモジュール。

- 保存するのは working deck 上のインデックスのみ
- 直近 BACK_LIMIT (5) 件を超えた分は古いものから捨てる
- 直前と同じインデックスは積まない（最終問題で「次へ」を連打した場合など）
- redo 用の前方スタックは持たない
"""

from __future__ import annotations

from typing import List, Optional

BACK_LIMIT = 5


class BackHistory:
    """
    件数上限つきの戻り履歴。
    """

    def __init__(self, limit: int = BACK_LIMIT):
        self.limit = limit
        self._stack: List[int] = []

    # ---------------------------------------------------------
    # 履歴を追加
    # ---------------------------------------------------------
    def push(self, index: int) -> None:
        """インデックスを積む。直前と同じなら何もしない。"""
        if self._stack and self._stack[-1] == index:
            return
        self._stack.append(index)
        if len(self._stack) > self.limit:
            del self._stack[: len(self._stack) - self.limit]

    # ---------------------------------------------------------
    # 取り出し
    # ---------------------------------------------------------
    def pop(self) -> Optional[int]:
        """最新のインデックスを取り出す。空なら None。"""
        if not self._stack:
            return None
        return self._stack.pop()

    def clear(self) -> None:
        self._stack.clear()

    # ---------------------------------------------------------
    # 状態を取得（UI 用）
    # ---------------------------------------------------------
    @property
    def can_go_back(self) -> bool:
        return bool(self._stack)

    def snapshot(self) -> List[int]:
        """古い順のコピー"""
        return list(self._stack)

    def __len__(self) -> int:
        return len(self._stack)
