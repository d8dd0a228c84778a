import pytest

from resume_terminal.autocomplete import Key, KeyEvent
from resume_terminal.output import GridOutput, parse_output
from resume_terminal.session import TerminalSession, run_script

UP = KeyEvent(Key.ARROW_UP)
DOWN = KeyEvent(Key.ARROW_DOWN)
TAB = KeyEvent(Key.TAB)


@pytest.fixture
def session(document, registry):
    return TerminalSession(document, registry)


def type_text(session, text):
    for ch in text:
        session.press(KeyEvent(Key.CHARACTER, ch))


def test_only_valid_commands_are_recalled(session):
    for line in ("ls", "pwd", "badcmd"):
        session.submit(line)
    assert session.press(UP) == "pwd"
    assert session.press(UP) == "ls"
    assert session.press(UP) == "ls"
    assert session.history.entries == ["ls", "pwd"]


def test_down_past_newest_clears_input(session):
    session.submit("ls")
    session.press(UP)
    assert session.press(DOWN) == ""
    assert session.history.cursor is None


def test_cd_round_trip(session):
    session.submit("cd experience")
    assert session.cwd == "/experience"
    session.submit("cd ..")
    assert session.submit("pwd") == "/"


def test_failed_cd_keeps_directory(session):
    session.submit("cd skills")
    session.submit("cd nowhere")
    assert session.cwd == "/skills"


def test_log_and_clear(session):
    session.submit("pwd")
    assert session.log == ["$ pwd", "/"]
    session.submit("clear")
    assert session.log == []
    assert session.history.entries == ["pwd", "clear"]


def test_submit_uses_typed_input(session):
    type_text(session, "ls")
    out = session.submit()
    assert isinstance(parse_output(out), GridOutput)
    assert session.input_text == ""


def test_tab_completes_commands_then_entries(session):
    type_text(session, "ca")
    assert session.press(TAB) == "cat"
    type_text(session, " ab")
    assert session.press(TAB) == "cat about.txt"


def test_tab_cycles_and_typing_resets(session):
    type_text(session, "c")
    assert [session.press(TAB) for _ in range(5)] == ["cd", "cat", "clear", "copy", "cd"]
    session.press(KeyEvent(Key.BACKSPACE))
    assert session.autocomplete.prefix is None
    assert session.input_text == "c"


def test_history_recall_resets_autocomplete(session):
    session.submit("ls")
    type_text(session, "c")
    session.press(TAB)
    session.press(UP)
    assert session.input_text == "ls"
    assert session.autocomplete.prefix is None


def test_set_input_resets_autocomplete(session):
    type_text(session, "c")
    session.press(TAB)
    session.set_input("grep python")
    assert session.autocomplete.prefix is None
    assert session.input_text == "grep python"


def test_refresh_rebuilds_everything(session):
    session.submit("cd experience")
    session.submit("ls")
    session.refresh()
    assert session.cwd == "/"
    assert session.history.entries == []
    assert session.log == []
    assert session.press(UP) == ""


def test_session_without_document_stays_usable(registry):
    session = TerminalSession(None, registry)
    assert parse_output(session.submit("ls")) == GridOutput(items=())
    assert session.submit("cat about.txt") == "File not found: about.txt"


def test_run_script_skips_comments_and_blanks(session):
    outputs = run_script(session, ["# setup\n", "\n", "cd skills\n", "pwd\n"])
    assert outputs == ["Changed directory to /skills", "/skills"]


def test_pasted_control_characters_are_removed(session):
    session.set_input("  pwd\x07\n")
    assert session.input_text == "pwd"
    assert session.submit() == "/"
    assert session.history.entries == ["pwd"]


def test_typed_escape_is_ignored(session):
    type_text(session, "ls\x1b")
    assert session.input_text == "ls"


def test_ctrl_c_abandons_the_line(session):
    session.submit("pwd")
    session.press(UP)
    session.press(KeyEvent(Key.CHARACTER, "x"))
    assert session.press(KeyEvent(Key.INTERRUPT)) == ""
    assert session.log == ["$ pwd", "/", "$ pwdx", "^C"]
    assert session.history.cursor is None
    assert session.history.entries == ["pwd"]


def test_ctrl_l_clears_the_log_only(session):
    session.submit("pwd")
    type_text(session, "ls")
    assert session.press(KeyEvent(Key.CLEAR_SCREEN)) == "ls"
    assert session.log == []
    assert session.history.entries == ["pwd"]
