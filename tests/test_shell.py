import re

import pytest
from colorama import Fore

from resume_terminal.output import (
    CoffeeOutput, GrepMatch, GrepOutput, GridItem, GridOutput, ListOutput,
    MatrixOutput, to_json,
)
from resume_terminal.session import TerminalSession
from resume_terminal import shell as shell_module
from resume_terminal.shell import ResumeShell, render_grid, render_output

ANSI = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def plain(text):
    return ANSI.sub("", text)


@pytest.fixture
def shell(document, registry):
    return ResumeShell(TerminalSession(document, registry), "{cwd}> ")


def test_render_plain_text_falls_back():
    assert plain(render_output("Changed directory to /x")) == "Changed directory to /x"
    assert plain(render_output("{broken json")) == "{broken json"


def test_render_grid_columns():
    grid = GridOutput(items=(GridItem("skills", "directory"), GridItem("about.txt", "file")))
    assert plain(render_grid(grid, cols=100)) == "skills/    about.txt"
    assert plain(render_grid(grid, cols=5)).splitlines() == ["skills/", "about.txt"]
    assert plain(render_grid(GridOutput(items=()), cols=80)) == "(empty)"


def test_render_list_and_grep():
    assert plain(render_output(to_json(ListOutput(items=("a", "b"))))) == "  • a\n  • b"
    grep = GrepOutput(matches=(
        GrepMatch("skills/technical.txt", 1, "Mathematics, Python", "python"),
        GrepMatch("about.txt", 12, "python rocks", "python"),
    ))
    lines = plain(render_output(to_json(grep))).splitlines()
    assert lines == [
        "skills/technical.txt   1  Mathematics, Python",
        f"{'about.txt':<20}  12  python rocks",
    ]


def test_render_presentation_payloads():
    matrix = plain(render_output(to_json(MatrixOutput(lines=4, columns=8)))).splitlines()
    assert len(matrix) == 4 and all(len(row) == 8 for row in matrix)
    assert "Coffee break" in plain(render_output(to_json(CoffeeOutput())))


def test_shell_runs_commands_and_updates_prompt(shell, capsys):
    shell.onecmd("cd experience")
    shell.postcmd(False, "cd experience")
    assert "Changed directory to /experience" in plain(capsys.readouterr().out)
    assert plain(shell.prompt) == "/experience> "
    shell.onecmd("cd..")
    assert shell.session.cwd == "/"


def test_shell_help_goes_through_registry(shell, capsys):
    shell.onecmd("help pwd")
    assert plain(capsys.readouterr().out).strip() == "pwd: Print current working directory\nUsage: pwd"


def test_shell_unknown_command(shell, capsys):
    shell.onecmd("badcmd")
    assert "is not a valid command" in capsys.readouterr().out
    assert shell.session.history.entries == []


def test_shell_exit_and_refresh(shell, capsys):
    shell.onecmd("cd skills")
    shell.onecmd("refresh")
    assert shell.session.cwd == "/"
    assert shell.onecmd("exit") is True
    assert shell.onecmd("EOF") is True


def test_shell_completion(shell):
    assert shell.completenames("c") == ["cd", "cat", "clear", "copy"]
    assert shell.completedefault("ab", "cat ab", 4, 6) == ["about.txt"]


class FakeReadline:
    """Just enough of readline's history API; items are 1-based."""

    def __init__(self, *lines):
        self.lines = list(lines)

    def get_current_history_length(self):
        return len(self.lines)

    def get_history_item(self, index):
        return self.lines[index - 1]

    def remove_history_item(self, pos):
        del self.lines[pos]

    def clear_history(self):
        self.lines = []


def test_errors_red_usage_yellow():
    assert render_output("Error: 'x' is not a valid command.").startswith(Fore.RED)
    assert render_output("Usage: cd <directory>").startswith(Fore.YELLOW)


def test_session_history_keeps_the_line_as_typed(shell):
    shell.onecmd("ls  ")
    shell.onecmd("cd..")
    assert shell.session.history.entries == ["ls  ", "cd.."]


def test_readline_drops_rejected_line(shell, monkeypatch):
    fake = FakeReadline("ls", "badcmd")
    monkeypatch.setattr(shell_module, "readline", fake)
    shell.onecmd("badcmd")
    assert fake.lines == ["ls"]


def test_readline_keeps_unrelated_entries(shell, monkeypatch):
    fake = FakeReadline("ls", "pwd")
    monkeypatch.setattr(shell_module, "readline", fake)
    shell.onecmd("badcmd")
    shell.onecmd("pwd")
    assert fake.lines == ["ls", "pwd"]


def test_readline_forgets_exit_and_refresh(shell, monkeypatch, capsys):
    fake = FakeReadline("pwd", "exit")
    monkeypatch.setattr(shell_module, "readline", fake)
    assert shell.onecmd("exit") is True
    assert fake.lines == ["pwd"]
    fake.lines.append("refresh")
    shell.onecmd("refresh")
    assert fake.lines == []
