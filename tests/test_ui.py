from conftest import make_entry
from words_quiz import ui
from words_quiz.models import SessionSummary


def test_missed_items_frame_columns():
    summary = SessionSummary(
        total_asked=2,
        missed_items=[
            make_entry("стіл", "table", "masculine"),
            make_entry("пити", "to drink"),
        ],
        score=0.5,
    )
    frame = ui.missed_items_frame(summary)
    assert list(frame.columns) == ["Word", "Meaning", "Gender"]
    assert frame["Gender"].tolist() == ["Masculine", ""]


def test_browser_feedback_queues_until_flush(monkeypatch):
    emitted = []
    monkeypatch.setattr(ui.components, "html", lambda body, height: emitted.append(body))

    fb = ui.BrowserFeedback("uk-UA")
    fb.speak("стіл", 0.5)
    fb.haptic("error")
    fb.sound("success")
    assert emitted == []
    assert len(fb.pending) == 3

    fb.flush()
    assert len(emitted) == 1
    assert '"uk-UA"' in emitted[0]
    assert "u.rate = 1.00" in emitted[0]
    assert fb.pending == []

    fb.flush()
    assert len(emitted) == 1
