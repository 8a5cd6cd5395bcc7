"""
ui.py
======================

Streamlit ベースの UI コンポーネントをまとめたモジュール。

責務:
- iPhone Safari を主ターゲットとしたレイアウトとスタイル（ライト / ダーク）
- クイズ画面の描画（単語・意味の選択肢・性の選択肢・進捗）
- 結果画面（正答率・間違えた単語の一覧）
- カテゴリ絞り込みのチップ
- ブラウザ側の読み上げ・振動・効果音 (BrowserFeedback)

ここでは「見た目」と「ユーザー操作の入力」を扱い、
採点や出題順などのロジックは QuizSession 側に任せる。

戻り値として「何が押されたか」「どの選択肢が選ばれたか」を返す。
"""

from __future__ import annotations

import html
import json
import logging
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from .engine import QuizSession
from .feedback import speech_rate_to_voice_rate
from .models import ALL_CATEGORIES, GENDER_CHOICES, SessionSummary

log = logging.getLogger(__name__)

# ----------------------------------------------------------------------
#  テーマ定義（ウクライナ国旗の青・黄をアクセントに）
# ----------------------------------------------------------------------
FLAG_BLUE = "#0057b8"
FLAG_YELLOW = "#ffd700"

THEMES: Dict[str, Dict[str, str]] = {
    "light": {
        "bg": "#ffffff",
        "text": "#1c1c1e",
        "surface": "#f2f2f7",
        "surface_alt": "#ffffff",
        "border": "#d1d1d6",
        "primary": FLAG_BLUE,
        "accent": FLAG_YELLOW,
        "correct": "#34c759",
        "incorrect": "#ff3b30",
    },
    "dark": {
        "bg": "#000000",
        "text": "#f5f5f7",
        "surface": "#1c1c1e",
        "surface_alt": "#2c2c2e",
        "border": "#3a3a3c",
        "primary": "#0a84ff",
        "accent": FLAG_YELLOW,
        "correct": "#30d158",
        "incorrect": "#ff453a",
    },
}

GENDER_LABELS: Dict[str, str] = {
    "masculine": "Masculine",
    "feminine": "Feminine",
    "neuter": "Neuter",
}


# ----------------------------------------------------------------------
#  CSS 生成
# ----------------------------------------------------------------------
def _generate_css(theme: Dict[str, str]) -> str:
    """テーマに応じたグローバル CSS を生成する。"""

    return f"""
    <style>
    html, body, .stApp {{
        background: {theme['bg']};
        color: {theme['text']};
        -webkit-text-size-adjust: 100%;
        touch-action: manipulation;
        -webkit-tap-highlight-color: rgba(0,0,0,0);
        font-family: -apple-system, BlinkMacSystemFont, "SF Pro Text",
                     "Helvetica Neue", Arial, sans-serif;
    }}

    .uw-header {{
        display: flex;
        justify-content: space-between;
        align-items: center;
        font-size: 0.85rem;
        margin-bottom: 0.3rem;
    }}

    .uw-progress-bar {{
        height: 8px;
        background: {theme['border']}55;
        border-radius: 4px;
        overflow: hidden;
        margin-bottom: 0.75rem;
    }}

    .uw-progress-fill {{
        height: 8px;
        background: linear-gradient(90deg, {theme['primary']}, {theme['accent']});
        border-radius: 4px;
        transition: width 0.3s ease-out;
    }}

    .uw-word-card {{
        background: {theme['surface_alt']};
        padding: 1.4rem 1rem;
        border-radius: 16px;
        border: 1px solid {theme['border']};
        text-align: center;
        font-size: 2.2rem;
        font-weight: 600;
        margin-bottom: 0.75rem;
    }}

    .uw-hint {{
        font-size: 0.85rem;
        opacity: 0.7;
        margin-bottom: 0.4rem;
    }}

    .uw-result-correct {{
        padding: 0.5rem 0.8rem;
        border-radius: 10px;
        background: {theme['correct']}22;
        border: 1px solid {theme['correct']};
        margin-bottom: 0.4rem;
    }}

    .uw-result-incorrect {{
        padding: 0.5rem 0.8rem;
        border-radius: 10px;
        background: {theme['incorrect']}22;
        border: 1px solid {theme['incorrect']};
        margin-bottom: 0.4rem;
    }}

    .uw-stat {{
        text-align: center;
        padding: 0.6rem;
        border-radius: 12px;
        background: {theme['surface']};
        border: 1px solid {theme['border']};
    }}

    .uw-stat-value {{
        font-size: 1.6rem;
        font-weight: 700;
        color: {theme['primary']};
    }}

    .uw-safe-bottom {{
        height: 80px; /* iPhone Safari 下部 UI に埋もれないための余白 */
    }}
    </style>
    """


def inject_theme(dark_mode: bool) -> Dict[str, str]:
    """ダークモード設定に応じて CSS を注入し、テーマ dict を返す。"""
    theme = THEMES["dark" if dark_mode else "light"]
    st.markdown(_generate_css(theme), unsafe_allow_html=True)
    return theme


# ----------------------------------------------------------------------
#  ブラウザ側フィードバック
# ----------------------------------------------------------------------
class BrowserFeedback:
    """
    FeedbackSink のブラウザ実装。

    - speak: Web Speech API (speechSynthesis)
    - haptic: navigator.vibrate（対応端末のみ）
    - sound: WebAudio の短いビープ

    コマンド処理中に st.rerun() されても消えないよう、JS はいったん溜めておき
    次の描画で flush() が高さ 0 の iframe に差し込む。結果は待たない。
    """

    def __init__(self, language: str = "uk-UA"):
        self.language = language
        self.pending: List[str] = []

    def _run_js(self, script: str) -> None:
        self.pending.append(script)

    def flush(self) -> None:
        scripts, self.pending = self.pending, []
        if scripts:
            log.debug("flushing %d feedback scripts", len(scripts))
            body = "\n".join("{" + s + "}" for s in scripts)
            components.html(f"<script>{body}</script>", height=0)

    def speak(self, text: str, rate: float) -> None:
        voice_rate = speech_rate_to_voice_rate(rate)
        self._run_js(
            "const s = window.parent.speechSynthesis || window.speechSynthesis;"
            "s.cancel();"
            f"const u = new SpeechSynthesisUtterance({json.dumps(text)});"
            f"u.lang = {json.dumps(self.language)};"
            f"u.rate = {voice_rate:.2f};"
            "s.speak(u);"
        )

    def haptic(self, kind: str) -> None:
        pattern = "[40]" if kind == "success" else "[60, 40, 60]"
        self._run_js(
            "const n = window.parent.navigator || navigator;"
            f"if (n.vibrate) {{ n.vibrate({pattern}); }}"
        )

    def sound(self, kind: str) -> None:
        freq = 880 if kind == "success" else 220
        self._run_js(
            "const C = window.AudioContext || window.webkitAudioContext;"
            "if (C) {"
            " const ctx = new C(); const o = ctx.createOscillator(); const g = ctx.createGain();"
            f" o.frequency.value = {freq}; g.gain.value = 0.08;"
            " o.connect(g); g.connect(ctx.destination);"
            " o.start(); o.stop(ctx.currentTime + 0.15);"
            "}"
        )


# ----------------------------------------------------------------------
#  公開 API: クイズページの描画
# ----------------------------------------------------------------------
def render_quiz_page(
    session: QuizSession,
    *,
    show_instructions: bool = True,
) -> Dict[str, Any]:
    """
    クイズページ全体を描画し、ユーザー操作の結果を返す。

    戻り値:
        {
          "meaning_choice": Optional[str],   # 新たに選ばれた意味
          "gender_choice": Optional[str],    # 新たに選ばれた性
          "clicked_next": bool,
          "clicked_prev": bool,
          "clicked_speak": bool,
          "clicked_reset_score": bool,
          "toggled_category": Optional[str],
        }
    """
    result: Dict[str, Any] = {
        "meaning_choice": None,
        "gender_choice": None,
        "clicked_next": False,
        "clicked_prev": False,
        "clicked_speak": False,
        "clicked_reset_score": False,
        "toggled_category": None,
    }

    with st.expander("Categories", expanded=False):
        result["toggled_category"] = _render_category_chips(session)

    # セーフティ: 単語がない場合
    item = session.current
    if item is None:
        if session.load_error:
            st.error("No words loaded. Check the vocabulary file.")
            st.caption(session.load_error)
        else:
            st.info("No words match the selected categories.")
        return result

    # ----------------------------------------
    # ヘッダー（カウンタ・得点・進捗）
    # ----------------------------------------
    percent = int(min(max(session.progress, 0.0), 1.0) * 100)
    st.markdown(
        "<div class='uw-header'>"
        f"<div>{html.escape(session.counter_text)}</div>"
        f"<div>{html.escape(session.score_text)}</div>"
        "</div>"
        "<div class='uw-progress-bar'>"
        f"<div class='uw-progress-fill' style='width:{percent}%'></div>"
        "</div>",
        unsafe_allow_html=True,
    )

    # ----------------------------------------
    # 単語カード
    # ----------------------------------------
    st.markdown(
        f"<div class='uw-word-card'>{html.escape(item.word)}</div>",
        unsafe_allow_html=True,
    )
    if st.button("🔊 Listen", key="uw_speak", use_container_width=True):
        result["clicked_speak"] = True

    # ----------------------------------------
    # 意味の選択肢
    # ----------------------------------------
    if show_instructions and session.phase == "meaning":
        st.markdown("<div class='uw-hint'>Choose the meaning</div>", unsafe_allow_html=True)

    answered = session.selected_meaning is not None
    for idx, option in enumerate(session.meaning_options):
        label = option
        if answered:
            if option == item.meaning:
                label = f"✅ {option}"
            elif option == session.selected_meaning:
                label = f"❌ {option}"
        if st.button(
            label,
            key=f"uw_meaning_{idx}",
            use_container_width=True,
            disabled=session.phase != "meaning",
        ):
            result["meaning_choice"] = option

    if answered:
        _render_answer_line(
            session.selected_meaning == item.meaning,
            f"Meaning: {item.meaning}",
        )

    # ----------------------------------------
    # 性の選択肢（名詞のみ）
    # ----------------------------------------
    if item.requires_gender and session.phase in ("gender", "done"):
        if show_instructions and session.phase == "gender":
            st.markdown("<div class='uw-hint'>Select the gender</div>", unsafe_allow_html=True)
        cols = st.columns(len(GENDER_CHOICES))
        for col, g in zip(cols, GENDER_CHOICES):
            with col:
                if st.button(
                    GENDER_LABELS[g],
                    key=f"uw_gender_{g}",
                    use_container_width=True,
                    disabled=session.phase != "gender",
                ):
                    result["gender_choice"] = g
        if session.selected_gender is not None:
            _render_answer_line(
                session.selected_gender == item.gender,
                f"Correct gender: {item.gender.capitalize()}",
            )

    # ----------------------------------------
    # ナビゲーション
    # ----------------------------------------
    col_prev, col_next = st.columns(2)
    with col_prev:
        if st.button("◀ Back", key="uw_prev", use_container_width=True, disabled=not session.can_go_back):
            result["clicked_prev"] = True
    with col_next:
        if st.button("Next ▶", key="uw_next", use_container_width=True):
            result["clicked_next"] = True

    if st.button("Reset score", key="uw_reset_score"):
        result["clicked_reset_score"] = True

    st.markdown("<div class='uw-safe-bottom'></div>", unsafe_allow_html=True)
    return result


def _render_answer_line(correct: bool, text: str) -> None:
    css = "uw-result-correct" if correct else "uw-result-incorrect"
    st.markdown(f"<div class='{css}'>{html.escape(text)}</div>", unsafe_allow_html=True)


def _render_category_chips(session: QuizSession) -> Optional[str]:
    """カテゴリのトグルボタン群。押されたカテゴリ名を返す。"""
    toggled: Optional[str] = None
    cols = st.columns(3)
    for i, cat in enumerate(ALL_CATEGORIES):
        selected = cat in session.active_categories
        label = f"✓ {cat}" if selected else cat
        with cols[i % 3]:
            if st.button(label, key=f"uw_cat_{cat}", use_container_width=True):
                toggled = cat
    if not session.active_categories:
        st.caption("No filter: all words are included.")
    return toggled


# ----------------------------------------------------------------------
#  公開 API: 結果画面
# ----------------------------------------------------------------------
def missed_items_frame(summary: SessionSummary) -> pd.DataFrame:
    """間違えた単語の一覧を DataFrame にする。"""
    rows: List[Dict[str, str]] = []
    for item in summary.missed_items:
        gender = "" if not item.requires_gender else item.gender.capitalize()
        rows.append({"Word": item.word, "Meaning": item.meaning, "Gender": gender})
    return pd.DataFrame(rows, columns=["Word", "Meaning", "Gender"])


def render_summary_page(summary: SessionSummary) -> Dict[str, bool]:
    """結果画面を描画し、押されたボタンを返す。"""
    st.markdown("## Session complete")

    stats = [
        ("Accuracy", f"{summary.accuracy_percent}%"),
        ("Correct", str(summary.correct_count)),
        ("Missed", str(summary.missed_count)),
    ]
    for col, (title, value) in zip(st.columns(3), stats):
        with col:
            st.markdown(
                "<div class='uw-stat'>"
                f"<div class='uw-stat-value'>{value}</div>"
                f"<div>{title}</div>"
                "</div>",
                unsafe_allow_html=True,
            )

    if summary.missed_count:
        st.markdown("### Words to review")
        st.dataframe(missed_items_frame(summary), use_container_width=True, hide_index=True)
    else:
        st.success("Perfect session!")

    col_retry, col_new = st.columns(2)
    with col_retry:
        retry = st.button(
            "Retry missed",
            key="uw_retry",
            use_container_width=True,
            disabled=summary.missed_count == 0,
        )
    with col_new:
        new_session = st.button("New session", key="uw_new_session", use_container_width=True)

    return {"retry_missed": retry, "new_session": new_session}
