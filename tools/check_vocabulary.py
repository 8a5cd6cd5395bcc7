"""
tools/check_vocabulary.py
===========================

単語データ (JSON) を検査するスクリプト。

主な役割:
- ファイルが読めるか（VocabularyLoadError にならないか）
- 品詞ごとの件数と、スキップされた壊れたレコードの件数
- カテゴリごとの件数（ALL_CATEGORIES に無いカテゴリは警告）
- 同じ単語の重複

使い方:
    python tools/check_vocabulary.py [--path data/ukrainian_vocabulary.json]

問題があれば終了コード 1 を返す。
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Dict, List

sys.path.append(str(Path(__file__).resolve().parents[1]))

from words_quiz.config import AppConfig
from words_quiz.errors import VocabularyLoadError
from words_quiz.models import ALL_CATEGORIES, WORD_CLASSES
from words_quiz.vocabulary import load_vocabulary


# -------------------------------------------------------------
#  集計
# -------------------------------------------------------------
def raw_record_counts(path: Path) -> Dict[str, int]:
    """JSON 上のレコード数（スキップ前）"""
    data = json.loads(path.read_text(encoding="utf-8"))
    counts: Dict[str, int] = {}
    for word_class in WORD_CLASSES:
        records = data.get(word_class)
        counts[word_class] = len(records) if isinstance(records, list) else 0
    return counts


def check(path: Path) -> List[str]:
    """問題点のメッセージ一覧を返す（空なら問題なし）。"""
    problems: List[str] = []

    try:
        vocab = load_vocabulary(path, force_reload=True)
    except VocabularyLoadError as e:
        return [str(e)]

    raw_counts = raw_record_counts(path)
    known = set(ALL_CATEGORIES)

    for word_class in WORD_CLASSES:
        entries = vocab[word_class]
        skipped = raw_counts[word_class] - len(entries)
        print(f"{word_class:<11} {len(entries):>5} words  (skipped: {skipped})")
        if skipped:
            problems.append(f"{word_class}: {skipped} 件の壊れたレコード")

        category_counts = Counter(c for e in entries for c in e.categories)
        for cat, n in sorted(category_counts.items()):
            mark = "" if cat in known else "  <- unknown category"
            print(f"    {cat:<12} {n:>5}{mark}")
            if cat not in known:
                problems.append(f"{word_class}: 未知のカテゴリ {cat}")

        duplicates = [w for w, n in Counter(e.word for e in entries).items() if n > 1]
        for w in duplicates:
            problems.append(f"{word_class}: 重複した単語 {w}")

    return problems


# -------------------------------------------------------------
#  エントリーポイント
# -------------------------------------------------------------
def main() -> None:
    parser = argparse.ArgumentParser(description="単語データ (JSON) を検査する")
    parser.add_argument(
        "--path",
        type=Path,
        default=None,
        help="単語ファイルのパス（省略時は AppConfig の既定値）",
    )
    parser.add_argument("--verbose", action="store_true", help="スキップしたレコードも表示する")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = args.path or AppConfig().vocabulary_path
    print(f"checking {path}")
    problems = check(path)

    if problems:
        print("\nproblems:")
        for p in problems:
            print(f"- {p}")
        sys.exit(1)
    print("\nOK")


if __name__ == "__main__":
    main()
