"""
errors.py
======================

words_quiz パッケージ共通の例外クラス。

- VocabularyLoadError: 単語データ (JSON) が読めない場合
- SettingsError: 設定ストアへの不正なキー・値の書き込み

どちらも「呼び出し側が拾って劣化動作に切り替える」前提で、
エンジン内部では握りつぶさずにログを残してから空デッキ等へフォールバックする。
"""


class WordsQuizError(Exception):
    """パッケージ内の例外の基底クラス。"""


class VocabularyLoadError(WordsQuizError):
    """単語ファイルが存在しない・壊れている場合に送出される。"""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"単語データを読み込めません: {path} ({reason})")


class SettingsError(WordsQuizError, ValueError):
    """未知の設定キー、または範囲外の値を set() しようとした場合。"""
