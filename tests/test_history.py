from resume_terminal.history import CommandHistory


def make(*lines):
    history = CommandHistory()
    for line in lines:
        history.record(line)
    return history


def test_up_walks_back_and_stops_at_oldest():
    history = make("ls", "pwd")
    assert history.previous() == "pwd"
    assert history.previous() == "ls"
    assert history.previous() == "ls"
    assert history.cursor == 0


def test_down_returns_to_live_input():
    history = make("ls", "pwd")
    history.previous()
    history.previous()
    assert history.next() == "pwd"
    assert history.next() == ""
    assert history.cursor is None
    assert history.next() is None


def test_down_without_cursor_is_a_no_op():
    assert make("ls").next() is None


def test_empty_history():
    history = CommandHistory()
    assert history.previous() is None
    assert history.cursor is None


def test_record_resets_cursor_and_clear_forgets():
    history = make("ls")
    history.previous()
    history.record("pwd")
    assert history.cursor is None
    assert history.entries == ["ls", "pwd"]
    history.clear()
    assert len(history) == 0
