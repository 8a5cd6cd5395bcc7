"""
words_quiz パッケージ
======================

このパッケージは、ウクライナ語単語クイズアプリの内部ロジックを提供する。

主な役割:
- 設定管理（config）・永続設定ストア（settings）
- 単語データの読み込み（vocabulary）
- デッキ組み立てと意味の選択肢生成（deck）
- クイズのセッションエンジン（engine）
- 戻り履歴（history）
- 読み上げ・振動・効果音の窓口（feedback）
- UI コンポーネント（ui）

app.py は Streamlit UI のみを担当し、内部ロジックはすべて本パッケージから呼ぶ。
ui は streamlit を import するため、ここでは読み込まない。
"""

from .config import AppConfig
from .deck import build_working_deck, make_meaning_options
from .engine import QuizSession
from .errors import SettingsError, VocabularyLoadError, WordsQuizError
from .feedback import FeedbackSink, GuardedFeedback, NullFeedback
from .history import BackHistory
from .models import CardState, SessionSummary, VocabEntry
from .settings import QuizSettings, SettingsStore
from .vocabulary import VocabularySource, load_vocabulary

__all__ = [
    "AppConfig",
    "build_working_deck",
    "make_meaning_options",
    "QuizSession",
    "SettingsError",
    "VocabularyLoadError",
    "WordsQuizError",
    "FeedbackSink",
    "GuardedFeedback",
    "NullFeedback",
    "BackHistory",
    "CardState",
    "SessionSummary",
    "VocabEntry",
    "QuizSettings",
    "SettingsStore",
    "VocabularySource",
    "load_vocabulary",
]
