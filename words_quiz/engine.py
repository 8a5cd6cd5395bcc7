"""
engine.py
======================

単語クイズのセッションエンジン (QuizSession)。

1 セッション分の状態をすべてメモリ上で保持する:
- full deck（選択中の品詞の全単語）と working deck（絞り込み・シャッフル・件数制限後）
- 現在位置、単語 id → CardState の対応表
- 得点 (0.5 刻み)・出題済み数・間違えた単語・戻り履歴 (最大 5 件)
- 絞り込みカテゴリ（設定ストアに永続化）・結果画面フラグ

各単語は「意味 → 性 → 完了」の順に進む。性を持たない単語（動詞・形容詞）は
「意味 → 完了」。UI フレームワークには依存せず、UI 側は問い合わせ用の
プロパティとコマンドの戻り値、または subscribe() した通知で状態を知る。

コマンドの呼び出しはすべて 1 つの制御スレッドから同期的に行う前提。
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Dict, Iterable, List, Optional

from .deck import build_working_deck, make_meaning_options
from .errors import VocabularyLoadError
from .feedback import FeedbackSink, GuardedFeedback
from .history import BACK_LIMIT, BackHistory
from .models import CardState, SessionSummary, VocabEntry
from .settings import QuizSettings, SettingsStore

log = logging.getLogger(__name__)

Listener = Callable[[str], None]

SCORE_STEP = 0.5


class QuizSession:
    """
    クイズ 1 セッション分の状態機械。

    主な機能:
    - rebuild_working_deck(): 設定とカテゴリから出題デッキを作り直す
    - submit_meaning() / submit_gender(): 回答と採点
    - next() / previous(): 進む・戻る（戻りは直近 5 件まで）
    - retry_missed_only() / start_new_session(): 結果画面からの再開

    不正なタイミングでのコマンド呼び出しは何もせず False を返す。
    """

    def __init__(
        self,
        settings: Optional[QuizSettings] = None,
        source: Any = None,
        store: Optional[SettingsStore] = None,
        feedback: Optional[FeedbackSink] = None,
        rng: Optional[random.Random] = None,
        full_deck: Optional[Iterable[VocabEntry]] = None,
    ):
        if settings is None:
            settings = store.as_settings() if store is not None else QuizSettings()
        self.settings: QuizSettings = settings
        self.source = source
        self.store = store
        self.rng = rng or random.Random()
        self.feedback = GuardedFeedback(feedback, lambda: self.settings)

        # デッキ
        self._full_deck: List[VocabEntry] = []
        self._working_deck: List[VocabEntry] = []
        self.load_error: Optional[str] = None

        # クイズ状態
        self.current_index: int = 0
        self.score: float = 0.0
        self.total_asked: int = 0
        self.missed_items: List[VocabEntry] = []
        self.show_summary: bool = False
        self.active_categories = set(settings.active_categories)

        # 表示用（CardState から復元される）
        self.phase: str = "meaning"
        self.selected_meaning: Optional[str] = None
        self.selected_gender: Optional[str] = None
        self.meaning_options: List[str] = []

        self._states: Dict[str, CardState] = {}
        self._history = BackHistory(BACK_LIMIT)
        self._listeners: List[Listener] = []

        if full_deck is not None:
            self._full_deck = list(full_deck)
            self.rebuild_working_deck()
        else:
            self.reload_vocabulary()

    # ------------------------------------------------------------
    # 変更通知
    # ------------------------------------------------------------
    def subscribe(self, listener: Listener) -> None:
        """状態が変わるたびに listener(コマンド名) を呼ぶ。"""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                log.exception("listener failed on %s", event)

    # ------------------------------------------------------------
    # デッキの読み込み・組み立て
    # ------------------------------------------------------------
    @property
    def full_deck(self) -> List[VocabEntry]:
        return list(self._full_deck)

    @property
    def working_deck(self) -> List[VocabEntry]:
        return list(self._working_deck)

    def reload_vocabulary(self) -> bool:
        """
        選択中の品詞の単語を読み直し、デッキを作り直す。

        読み込みに失敗した場合は空デッキにして load_error にメッセージを残す。
        戻り値は読み込みに成功したかどうか。
        """
        self.load_error = None
        entries: List[VocabEntry] = []

        if self.source is not None:
            try:
                entries = list(self.source.load(self.settings.word_class))
            except VocabularyLoadError as e:
                log.warning("単語データの読み込みに失敗しました: %s", e)
                self.load_error = str(e)
                entries = []

        self._full_deck = entries
        self._rebuild()
        self._notify("reload_vocabulary")
        return self.load_error is None

    def set_full_deck(self, entries: Iterable[VocabEntry]) -> None:
        """外部で用意したエントリを full deck として差し替える。"""
        self._full_deck = list(entries)
        self.load_error = None
        self.rebuild_working_deck()

    def rebuild_working_deck(self) -> None:
        """現在の設定・カテゴリで working deck を作り直し、状態をリセットする。"""
        self._rebuild()
        self._notify("rebuild_working_deck")

    def _rebuild(self) -> None:
        self._working_deck = build_working_deck(
            self._full_deck,
            self.active_categories,
            shuffle=self.settings.shuffle_enabled,
            session_length=self.settings.session_length,
            rng=self.rng,
        )
        self._reset_progress()
        log.debug(
            "working deck: %d / %d words (categories=%s)",
            len(self._working_deck),
            len(self._full_deck),
            sorted(self.active_categories),
        )

    def _reset_progress(self) -> None:
        self.current_index = 0
        self._history.clear()
        self._states.clear()
        self.score = 0.0
        self.total_asked = 0
        self.missed_items = []
        self.show_summary = False
        self._start_current()

    # ------------------------------------------------------------
    # 現在の単語・CardState
    # ------------------------------------------------------------
    @property
    def current(self) -> Optional[VocabEntry]:
        if 0 <= self.current_index < len(self._working_deck):
            return self._working_deck[self.current_index]
        return None

    def card_state(self, entry_id: str) -> Optional[CardState]:
        """id に対応する CardState（無ければ None）。"""
        return self._states.get(entry_id)

    def _start_current(self) -> None:
        """現在の単語の CardState を用意し、表示用の値を復元し、選択肢を作る。"""
        cur = self.current
        if cur is not None and cur.id not in self._states:
            self._states[cur.id] = CardState()
        self._restore_state_to_ui()
        self.meaning_options = make_meaning_options(cur, self._working_deck, rng=self.rng)

    def _restore_state_to_ui(self) -> None:
        cur = self.current
        if cur is None:
            self.phase = "meaning"
            self.selected_meaning = None
            self.selected_gender = None
            return
        st = self._states.get(cur.id) or CardState()
        self.selected_meaning = st.selected_meaning
        self.selected_gender = st.selected_gender
        self.phase = st.phase

    def _state_for(self, entry: VocabEntry) -> CardState:
        st = self._states.get(entry.id)
        if st is None:
            st = self._states[entry.id] = CardState()
        return st

    def _record_missed(self, entry: VocabEntry) -> None:
        if all(m.id != entry.id for m in self.missed_items):
            self.missed_items.append(entry)

    # ------------------------------------------------------------
    # 回答
    # ------------------------------------------------------------
    def submit_meaning(self, choice: str) -> bool:
        """
        意味の回答。phase が meaning のときだけ受け付ける。

        正解の初回だけ 0.5 点加点（score_granted_meaning で 1 回に制限）。
        性を持つ単語は gender へ、持たない単語はここで done になり
        出題済み数を加算し、不正解なら間違えた単語に追加する。
        """
        cur = self.current
        if self.phase != "meaning" or cur is None:
            return False

        st = self._state_for(cur)
        st.selected_meaning = choice
        is_correct = choice == cur.meaning
        st.meaning_correct = is_correct

        if is_correct and not st.score_granted_meaning:
            self.score += SCORE_STEP
            st.score_granted_meaning = True
            self.feedback.success()
        elif not is_correct:
            self.feedback.error()

        if cur.requires_gender:
            st.phase = "gender"
        else:
            st.phase = "done"
            if st.meaning_correct is False:
                self._record_missed(cur)
            self.total_asked += 1

        self._restore_state_to_ui()
        self._notify("submit_meaning")
        return True

    def submit_gender(self, choice: str) -> bool:
        """性の回答。phase が gender のときだけ受け付ける。"""
        cur = self.current
        if self.phase != "gender" or cur is None:
            return False

        st = self._state_for(cur)
        st.selected_gender = choice
        is_correct = choice == cur.gender
        st.gender_correct = is_correct

        if is_correct and not st.score_granted_gender:
            self.score += SCORE_STEP
            st.score_granted_gender = True
            self.feedback.success()
        elif not is_correct:
            self.feedback.error()

        if st.phase != "done":
            self.total_asked += 1
        st.phase = "done"

        # 意味・性のどちらかを間違えていれば記録（重複なし）
        if not (st.meaning_correct and st.gender_correct):
            self._record_missed(cur)

        self._restore_state_to_ui()
        self._notify("submit_gender")
        return True

    # ------------------------------------------------------------
    # ナビゲーション
    # ------------------------------------------------------------
    def next(self) -> bool:
        """
        次の単語へ進む。最後の単語なら進まずに結果画面フラグを立てる。

        最後の単語でも現在位置を履歴に積むので、結果画面からの previous() は
        同じ単語に戻る。
        """
        if not self._working_deck:
            return False

        self._history.push(self.current_index)
        if self.current_index + 1 < len(self._working_deck):
            self.current_index += 1
        else:
            self.show_summary = True

        self._start_current()
        self._notify("next")
        return True

    def previous(self) -> bool:
        """履歴から 1 つ前の単語に戻る。履歴が空なら何もしない。"""
        prev_index = self._history.pop()
        if prev_index is None:
            return False

        self.current_index = prev_index
        self._start_current()
        self._notify("previous")
        return True

    @property
    def can_go_back(self) -> bool:
        return self._history.can_go_back

    # ------------------------------------------------------------
    # 得点・結果
    # ------------------------------------------------------------
    def reset_score(self) -> None:
        """
        得点と出題済み数を 0 に戻し、全 CardState の加点済みフラグを外す。
        回答内容と phase はそのまま。
        """
        self.score = 0.0
        self.total_asked = 0
        for st in self._states.values():
            st.score_granted_meaning = False
            st.score_granted_gender = False
        self._notify("reset_score")

    def summary(self) -> SessionSummary:
        return SessionSummary(
            total_asked=self.total_asked,
            missed_items=list(self.missed_items),
            score=self.score,
        )

    def retry_missed_only(self) -> None:
        """間違えた単語だけで新しいセッションを始める。無ければ結果画面を閉じるだけ。"""
        if not self.missed_items:
            self.show_summary = False
            self._notify("retry_missed_only")
            return

        deck = list(self.missed_items)
        self.rng.shuffle(deck)
        self._working_deck = deck
        self._reset_progress()
        self._notify("retry_missed_only")

    def start_new_session(self) -> None:
        """現在のフィルタ・設定で新しいセッションを始める。"""
        self._rebuild()
        self.show_summary = False
        self._notify("start_new_session")

    # ------------------------------------------------------------
    # カテゴリ・設定
    # ------------------------------------------------------------
    def toggle_category(self, category: str) -> None:
        if category in self.active_categories:
            self.active_categories.discard(category)
        else:
            self.active_categories.add(category)
        self.settings = self.settings.with_changes(active_categories=self.active_categories)
        self.rebuild_working_deck()
        self._write_settings(active_categories=sorted(self.active_categories))

    def set_active_categories(self, categories: Iterable[str]) -> None:
        self.active_categories = set(categories)
        self.settings = self.settings.with_changes(active_categories=self.active_categories)
        self.rebuild_working_deck()
        self._write_settings(active_categories=sorted(self.active_categories))

    def _write_settings(self, **changes: Any) -> None:
        """ストアへ書き出す。書けなくてもメモリ上の状態はそのまま使い続ける。"""
        if self.store is None:
            return
        try:
            self.store.update(**changes)
        except OSError:
            log.warning("設定を保存できませんでした: %s", sorted(changes), exc_info=True)

    def select_word_class(self, word_class: str) -> bool:
        """品詞を切り替えて単語を読み直す。"""
        self.settings = self.settings.with_changes(word_class=word_class)
        loaded = self.reload_vocabulary()
        self._write_settings(word_class=word_class)
        return loaded

    def update_settings(self, **changes: Any) -> None:
        """
        設定を検証・保存する。

        - word_class の変更は単語の読み直し
        - active_categories / shuffle_enabled / session_length の変更はデッキの作り直し
        - それ以外（読み上げ・振動・表示系）は状態に影響しない
        """
        if not changes:
            return
        old = self.settings
        new = old.with_changes(**changes)
        self.settings = new
        self._write_settings(**changes)

        if new.word_class != old.word_class:
            self.active_categories = set(new.active_categories)
            self.reload_vocabulary()
            return

        if new.active_categories != old.active_categories:
            self.active_categories = set(new.active_categories)

        if (
            new.shuffle_enabled != old.shuffle_enabled
            or new.session_length != old.session_length
            or new.active_categories != old.active_categories
        ):
            self.rebuild_working_deck()
        else:
            self._notify("update_settings")

    # ------------------------------------------------------------
    # 読み上げ
    # ------------------------------------------------------------
    def speak_current_word(self) -> None:
        cur = self.current
        if cur is None:
            return
        self.feedback.speak(cur.word)

    # ------------------------------------------------------------
    # 表示用の問い合わせ
    # ------------------------------------------------------------
    @property
    def progress(self) -> float:
        """(現在位置 + フェーズ分) / デッキ件数。meaning=0, gender=0.5, done=1.0。"""
        n = len(self._working_deck)
        if n == 0:
            return 0.0
        base = self.current_index / n
        if self.phase == "gender":
            return min(1.0, base + 0.5 / n)
        if self.phase == "done":
            return min(1.0, base + 1.0 / n)
        return base

    @property
    def score_text(self) -> str:
        return "Score: %.1f / %d" % (self.score, self.total_asked)

    @property
    def counter_text(self) -> str:
        if not self._working_deck:
            return ""
        return f"Word {self.current_index + 1} of {len(self._working_deck)}"

    @property
    def history_snapshot(self) -> List[int]:
        return self._history.snapshot()
