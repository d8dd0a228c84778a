"""One user's terminal: filesystem, history, completion state and screen log.

``TerminalSession`` is what a front end drives. It keeps the only reference
to the current filesystem and swaps it for the one each command returns.
"""

from typing import Iterable, List, Optional

from .autocomplete import (
    EMPTY_SESSION, Key, KeyEvent, candidates_for, reduce, strip_control,
)
from .commands import CommandRegistry, build_registry
from .history import CommandHistory
from .models import ResumeDocument
from .output import CLEAR_TERMINAL
from .parser import execute_command, parse_command, validate_command
from .vfs import VFS, build_vfs, format_path


class TerminalSession:

    def __init__(self, document: Optional[ResumeDocument],
                 registry: Optional[CommandRegistry] = None) -> None:
        self.document = document
        self.registry = registry if registry is not None else build_registry()
        self.vfs: VFS = build_vfs(document)
        self.history = CommandHistory()
        self.autocomplete = EMPTY_SESSION
        self.input_text = ""
        self.log: List[str] = []

    @property
    def cwd(self) -> str:
        return format_path(self.vfs.current_path)

    def submit(self, line: Optional[str] = None) -> str:
        """Run ``line`` (the current input by default) and return its output.

        The line goes into history only if it names a registered command.
        ``clear`` empties the log instead of adding to it.
        """
        if line is None:
            line = self.input_text
        parsed = parse_command(line)
        output, self.vfs = execute_command(parsed, self.registry, self.vfs)
        if output == CLEAR_TERMINAL:
            self.log.clear()
        else:
            self.log.extend([f"$ {line}", output])
        if validate_command(parsed, self.registry):
            self.history.record(line)
        self.history.reset_cursor()
        self.autocomplete = EMPTY_SESSION
        self.input_text = ""
        return output

    def press(self, event: KeyEvent) -> str:
        """Apply a keystroke to the input line and return the new input text.

        Ctrl+C echoes the abandoned line followed by ``^C`` and clears the
        input. Ctrl+L empties the log and leaves the input alone.
        """
        if event.key is Key.INTERRUPT:
            self.log.extend([f"$ {self.input_text}", "^C"])
            self.input_text = ""
            self.history.reset_cursor()
            self.autocomplete = EMPTY_SESSION
            return self.input_text
        if event.key is Key.CLEAR_SCREEN:
            self.log.clear()
            self.autocomplete = EMPTY_SESSION
            return self.input_text
        if event.key is Key.ARROW_UP:
            recalled = self.history.previous()
        elif event.key is Key.ARROW_DOWN:
            recalled = self.history.next()
        else:
            candidates = candidates_for(self.input_text, self.registry, self.vfs)
            self.autocomplete, self.input_text = reduce(
                self.autocomplete, event, self.input_text, candidates)
            return self.input_text
        self.autocomplete = EMPTY_SESSION
        if recalled is not None:
            self.input_text = recalled
        return self.input_text

    def set_input(self, text: str) -> None:
        """Replace the input line outright (paste, external edit).

        Control characters are dropped and surrounding whitespace trimmed.
        """
        self.input_text = strip_control(text).strip()
        self.autocomplete = EMPTY_SESSION

    def refresh(self) -> None:
        """Start over: rebuild the filesystem and forget history and output."""
        self.vfs = build_vfs(self.document)
        self.history.clear()
        self.autocomplete = EMPTY_SESSION
        self.input_text = ""
        self.log.clear()


def run_script(session: TerminalSession, lines: Iterable[str]) -> List[str]:
    """Submit each non-blank, non-comment line and collect the outputs."""
    outputs = []
    for raw in lines:
        line = raw.rstrip("\n")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        outputs.append(session.submit(line))
    return outputs
