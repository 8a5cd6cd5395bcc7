"""
feedback.py
======================

読み上げ・振動・効果音といった「一方通行」の外部出力の窓口。

エンジンは FeedbackSink の 3 メソッドだけを呼ぶ:
- speak(text, rate)
- haptic(kind)   kind = "success" | "error"
- sound(kind)

GuardedFeedback は設定の有効フラグを確認し、実装側で起きた例外は
ログに残して握りつぶす。戻り値は見ない。
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol, Tuple

from .settings import QuizSettings

log = logging.getLogger(__name__)


class FeedbackSink(Protocol):
    def speak(self, text: str, rate: float) -> None: ...

    def haptic(self, kind: str) -> None: ...

    def sound(self, kind: str) -> None: ...


class NullFeedback:
    """何もしない実装（ヘッドレス実行・テスト用）。"""

    def speak(self, text: str, rate: float) -> None:
        pass

    def haptic(self, kind: str) -> None:
        pass

    def sound(self, kind: str) -> None:
        pass


class RecordingFeedback:
    """呼び出しを記録するだけの実装。"""

    def __init__(self):
        self.calls: List[Tuple[str, tuple]] = []

    def speak(self, text: str, rate: float) -> None:
        self.calls.append(("speak", (text, rate)))

    def haptic(self, kind: str) -> None:
        self.calls.append(("haptic", (kind,)))

    def sound(self, kind: str) -> None:
        self.calls.append(("sound", (kind,)))


# ----------------------------------------------------------------------
#  GuardedFeedback
# ----------------------------------------------------------------------
class GuardedFeedback:
    """
    設定フラグを見てから sink を呼ぶラッパー。

    settings は呼び出し時点の値を使うため、getter (callable) で受け取る。
    """

    def __init__(
        self,
        sink: Optional[FeedbackSink],
        settings: Callable[[], QuizSettings],
    ):
        self.sink = sink if sink is not None else NullFeedback()
        self._settings = settings

    def _call(self, name: str, *args) -> None:
        try:
            getattr(self.sink, name)(*args)
        except Exception:
            log.exception("feedback %s failed", name)

    def success(self) -> None:
        """正解時: 振動 + 効果音"""
        s = self._settings()
        if s.haptics_enabled:
            self._call("haptic", "success")
        if s.answer_sounds_enabled:
            self._call("sound", "success")

    def error(self) -> None:
        """不正解時: 振動 + 効果音"""
        s = self._settings()
        if s.haptics_enabled:
            self._call("haptic", "error")
        if s.answer_sounds_enabled:
            self._call("sound", "error")

    def speak(self, text: Optional[str]) -> None:
        s = self._settings()
        if not text or not s.speech_enabled:
            return
        self._call("speak", text, s.speech_rate)


# ----------------------------------------------------------------------
#  読み上げ速度の変換
# ----------------------------------------------------------------------
def speech_rate_to_voice_rate(slider_rate: float) -> float:
    """
    設定のスライダー値 (0.2〜0.9, 既定 0.5) を Web Speech API の rate に変換する。

    0.5 → 1.0 を中心に線形に伸縮し、0.1〜2.0 に収める。
    """
    rate = 1.0 + (slider_rate - 0.5) * 2.0
    return min(max(rate, 0.1), 2.0)
