from words_quiz.history import BACK_LIMIT, BackHistory


def test_push_and_pop_in_lifo_order():
    h = BackHistory()
    h.push(0)
    h.push(1)
    assert h.can_go_back
    assert h.pop() == 1
    assert h.pop() == 0
    assert h.pop() is None
    assert not h.can_go_back


def test_history_keeps_only_the_most_recent_entries():
    h = BackHistory()
    for i in range(8):
        h.push(i)
    assert BACK_LIMIT == 5
    assert h.snapshot() == [3, 4, 5, 6, 7]


def test_duplicate_of_top_is_not_pushed():
    h = BackHistory()
    h.push(2)
    h.push(2)
    h.push(3)
    h.push(2)
    assert h.snapshot() == [2, 3, 2]


def test_clear():
    h = BackHistory(limit=2)
    h.push(1)
    h.clear()
    assert len(h) == 0
