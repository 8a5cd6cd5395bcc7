"""
app.py
======================

ウクライナ語単語クイズ（Streamlit）エントリーポイント。

特徴:
- ホーム画面で品詞（Nouns / Verbs / Adjectives）を選んで開始
- 意味 → 性（名詞のみ）の順に出題、0.5 点刻みの採点
- 直近 5 件まで「戻る」、セッション終了時に結果画面と間違えた単語だけの再挑戦
- カテゴリ絞り込み・シャッフル・1 セッションの単語数・読み上げなどの設定

内部ロジックはすべて words_quiz パッケージ側にあり、
このファイルはページの切り替えとボタン操作の受け渡しだけを担当する。

前提:
- data/ukrainian_vocabulary.json に単語が格納されている
- data/settings.json は無ければ自動で作られる
"""

from __future__ import annotations

import logging

import streamlit as st

from words_quiz.config import AppConfig
from words_quiz.engine import QuizSession
from words_quiz.models import WORD_CLASS_LABELS, WORD_CLASSES
from words_quiz.settings import SESSION_LENGTHS, SPEECH_RATE_MAX, SPEECH_RATE_MIN, SettingsStore
from words_quiz.ui import BrowserFeedback, inject_theme, render_quiz_page, render_summary_page
from words_quiz.vocabulary import VocabularySource


# ----------------------------------------------------------------------
#  設定 / セッションのラッパー
# ----------------------------------------------------------------------
def get_app_config() -> AppConfig:
    if "app_config" not in st.session_state:
        st.session_state["app_config"] = AppConfig()
    return st.session_state["app_config"]


def get_store() -> SettingsStore:
    """SettingsStore をセッションに保持して返す。"""
    if "settings_store" not in st.session_state:
        store = SettingsStore(config=get_app_config())
        store.load()
        st.session_state["settings_store"] = store
    return st.session_state["settings_store"]


def get_feedback() -> BrowserFeedback:
    if "browser_feedback" not in st.session_state:
        st.session_state["browser_feedback"] = BrowserFeedback(get_app_config().language)
    return st.session_state["browser_feedback"]


def get_session() -> QuizSession:
    """QuizSession をセッションに保持して返す。"""
    if "quiz_session" not in st.session_state:
        cfg = get_app_config()
        st.session_state["quiz_session"] = QuizSession(
            store=get_store(),
            source=VocabularySource(cfg.vocabulary_path),
            feedback=get_feedback(),
        )
    return st.session_state["quiz_session"]


def set_page(page: str) -> None:
    st.session_state["page"] = page


def get_page() -> str:
    return st.session_state.get("page", "home")


# ----------------------------------------------------------------------
#  ページ: ホーム（品詞の選択）
# ----------------------------------------------------------------------
def render_home_page() -> None:
    cfg = get_app_config()
    store = get_store()

    st.markdown(f"## 🇺🇦 {cfg.app_name}")
    st.write("Learn Ukrainian words: meaning first, then gender.")

    for word_class in WORD_CLASSES:
        if st.button(WORD_CLASS_LABELS[word_class], key=f"home_{word_class}", use_container_width=True):
            session = get_session()
            if session.settings.word_class != word_class or session.load_error:
                session.select_word_class(word_class)
            else:
                session.start_new_session()
            if not store.get("has_seen_welcome"):
                set_page("guide")
            else:
                set_page("quiz")
            st.rerun()

    st.write("---")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("⚙️ Settings", use_container_width=True):
            set_page("settings")
            st.rerun()
    with col2:
        if st.button("📖 Gender guide", use_container_width=True):
            set_page("guide")
            st.rerun()


# ----------------------------------------------------------------------
#  ページ: クイズ
# ----------------------------------------------------------------------
def render_quiz_main_page() -> None:
    session = get_session()

    if session.show_summary:
        actions = render_summary_page(session.summary())
        if actions["retry_missed"]:
            session.retry_missed_only()
            st.rerun()
        elif actions["new_session"]:
            session.start_new_session()
            st.rerun()
        _render_home_link()
        return

    ui_result = render_quiz_page(session, show_instructions=session.settings.show_instructions)

    # 回答（エンジン側で phase を確認するので、ここでは渡すだけ）
    if ui_result["meaning_choice"] is not None:
        session.submit_meaning(ui_result["meaning_choice"])
        st.rerun()
    elif ui_result["gender_choice"] is not None:
        session.submit_gender(ui_result["gender_choice"])
        st.rerun()

    # ナビゲーション
    if ui_result["clicked_next"]:
        session.next()
        st.rerun()
    elif ui_result["clicked_prev"]:
        session.previous()
        st.rerun()
    elif ui_result["clicked_speak"]:
        session.speak_current_word()
        st.rerun()
    elif ui_result["clicked_reset_score"]:
        session.reset_score()
        st.rerun()
    elif ui_result["toggled_category"] is not None:
        session.toggle_category(ui_result["toggled_category"])
        st.rerun()

    _render_home_link()


def _render_home_link() -> None:
    if st.button("🏠 Home", use_container_width=True):
        set_page("home")
        st.rerun()


# ----------------------------------------------------------------------
#  ページ: 設定
# ----------------------------------------------------------------------
def render_settings_page() -> None:
    st.markdown("## ⚙️ Settings")

    session = get_session()
    s = session.settings
    changes = {}

    st.markdown("### Feedback")
    haptics = st.toggle("Haptics", value=s.haptics_enabled)
    sounds = st.toggle("Answer sounds", value=s.answer_sounds_enabled)
    speech = st.toggle("Speak words", value=s.speech_enabled)
    rate = st.slider(
        "Speech rate",
        min_value=SPEECH_RATE_MIN,
        max_value=SPEECH_RATE_MAX,
        value=float(s.speech_rate),
        step=0.05,
        disabled=not speech,
    )

    st.markdown("### Session")
    shuffle = st.toggle("Shuffle words", value=s.shuffle_enabled)
    length_labels = {0: "All", 10: "10", 20: "20", 50: "50"}
    length = st.radio(
        "Number of words",
        list(SESSION_LENGTHS),
        index=list(SESSION_LENGTHS).index(s.session_length),
        horizontal=True,
        format_func=lambda v: length_labels[v],
    )
    st.caption(
        "Practice with all words in the selected categories."
        if length == 0
        else f"Practice with {length} words per session."
    )
    word_class = st.radio(
        "Word type",
        list(WORD_CLASSES),
        index=list(WORD_CLASSES).index(s.word_class),
        horizontal=True,
        format_func=lambda k: WORD_CLASS_LABELS[k],
    )

    st.markdown("### Display")
    instructions = st.toggle("Show instructions", value=s.show_instructions)
    dark = st.toggle("Dark mode", value=s.dark_mode_enabled)

    new_values = {
        "haptics_enabled": haptics,
        "answer_sounds_enabled": sounds,
        "speech_enabled": speech,
        "speech_rate": float(rate),
        "shuffle_enabled": shuffle,
        "session_length": length,
        "word_class": word_class,
        "show_instructions": instructions,
        "dark_mode_enabled": dark,
    }
    for key, value in new_values.items():
        if getattr(s, key) != value:
            changes[key] = value

    if changes:
        session.update_settings(**changes)
        st.rerun()

    _render_home_link()


# ----------------------------------------------------------------------
#  ページ: 性の見分け方
# ----------------------------------------------------------------------
def render_guide_page() -> None:
    st.markdown("## 📖 Gender guide")

    st.markdown(
        """
**Masculine (чол. рід)**
- Usually ends in a consonant: _стіл_ "table", _будинок_ "house".
- Some nouns ending in **-ь** are masculine: _кінь_ "horse", _день_ "day".
- Nouns for **male people** are masculine: _хлопець_ "boy", _чоловік_ "man".
- A few masculine nouns end in **-о**: _тато_ "dad", _дядько_ "uncle".

**Feminine (жін. рід)**
- Usually ends in **-а / -я**: _книга_ "book", _земля_ "earth".
- Many nouns ending in **-ь** are feminine: _ніч_ "night", _сіль_ "salt".
- Abstract **-ість** words are feminine: _швидкість_ "speed".

**Neuter (сер. рід)**
- Usually ends in **-о / -е / -я**: _вікно_ "window", _море_ "sea", _ім'я_ "name".
- Many **-ко** diminutives are neuter: _яблуко_ "apple".

This app quizzes **meaning first**, then **gender** to reinforce both.
        """
    )

    store = get_store()
    if st.button("Got it", use_container_width=True):
        if not store.get("has_seen_welcome"):
            get_session().update_settings(has_seen_welcome=True)
            set_page("quiz")
        else:
            set_page("home")
        st.rerun()


# ----------------------------------------------------------------------
#  メイン
# ----------------------------------------------------------------------
def main() -> None:
    st.set_page_config(
        page_title="Ukrainian Words",
        page_icon="🇺🇦",
        layout="centered",
    )
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    session = get_session()
    inject_theme(session.settings.dark_mode_enabled)

    # 直前の操作で溜まった読み上げ・振動・効果音を流す
    get_feedback().flush()

    page = get_page()

    if page == "quiz":
        render_quiz_main_page()
    elif page == "settings":
        render_settings_page()
    elif page == "guide":
        render_guide_page()
    else:
        # デフォルトはホーム
        set_page("home")
        render_home_page()


if __name__ == "__main__":
    main()
