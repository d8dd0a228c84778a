"""Interactive terminal front end.

Reads lines with ``cmd.Cmd``/readline, hands them to a ``TerminalSession`` and
draws the results with colorama. Structured outputs are turned back into
typed values with ``parse_output``; anything else is printed as text.
"""

import logging
import random
import shutil
from cmd import Cmd
from typing import Any, List, Optional

from colorama import Fore, Style

from .autocomplete import filter_matches
from .output import (
    CLEAR_TERMINAL, DIRECTORY, CoffeeOutput, GameOutput, GrepOutput,
    GridOutput, ListOutput, MatrixOutput, MeltdownOutput, TextOutput,
    parse_output,
)
from .session import TerminalSession
from .vfs import PathError, list_directory

# optional module
try:
    import readline
except ImportError:
    readline = None

logger = logging.getLogger(__name__)

RAND = random.Random(42)
MATRIX_CHARS = "01アイウエオカキクケコサシスセソタチツテト"


def _term_cols(default: int = 100) -> int:
    """Return the terminal width or a default value if it cannot be determined."""
    try:
        return shutil.get_terminal_size().columns
    except Exception:
        return default


# ---------- Rendering ----------
def c(text: Any, color: str = Fore.CYAN) -> str:
    """Colourise text for terminal display."""
    lines = str(text).splitlines() or [""]
    return "\n".join(f"{color}{ln}{Style.RESET_ALL}" for ln in lines)


def _highlight(text: str, keyword: str) -> str:
    """Wrap every case-insensitive occurrence of ``keyword`` in bright red."""
    if not keyword:
        return text
    lowered, parts, start = text.lower(), [], 0
    while True:
        hit = lowered.find(keyword, start)
        if hit < 0:
            parts.append(text[start:])
            return "".join(parts)
        end = hit + len(keyword)
        parts.append(text[start:hit])
        parts.append(f"{Style.BRIGHT}{Fore.RED}{text[hit:end]}{Style.RESET_ALL}")
        start = end


def render_grid(out: GridOutput, cols: int) -> str:
    """Lay entries out in columns that fit the terminal; directories get a slash."""
    if not out.items:
        return c("(empty)", Fore.LIGHTBLACK_EX)
    labels = [i.name + ("/" if i.kind == DIRECTORY else "") for i in out.items]
    colw = max(len(x) for x in labels) + 2
    per_row = max(1, cols // colw)
    rows: List[str] = []
    for i in range(0, len(labels), per_row):
        row = list(zip(out.items[i:i + per_row], labels[i:i + per_row]))
        row_items = []
        for n, (item, label) in enumerate(row):
            colour = Fore.BLUE + Style.BRIGHT if item.kind == DIRECTORY else Fore.WHITE
            # no padding after the last entry of a row
            padded = label if n == len(row) - 1 else label.ljust(colw)
            row_items.append(f"{colour}{padded}{Style.RESET_ALL}")
        rows.append("".join(row_items))
    return "\n".join(rows)


def render_grep(out: GrepOutput) -> str:
    """Aligned ``path  line  content`` rows with the keyword highlighted."""
    path_w = max(len(m.path) for m in out.matches)
    line_w = max(len(str(m.line)) for m in out.matches)
    rows = []
    for m in out.matches:
        location = f"{Fore.MAGENTA}{m.path.ljust(path_w)}{Style.RESET_ALL}"
        number = f"{Fore.GREEN}{str(m.line).rjust(line_w)}{Style.RESET_ALL}"
        rows.append(f"{location}  {number}  {_highlight(m.content, m.keyword)}")
    return "\n".join(rows)


def render_matrix(out: MatrixOutput) -> str:
    lines = ("".join(RAND.choice(MATRIX_CHARS) for _ in range(out.columns)) for _ in range(out.lines))
    return c("\n".join(lines), Fore.GREEN)


COFFEE_CUP = r"""
    ( (
     ) )
  ........
  |      |]
  \      /
   `----'
""".strip("\n")


def render_output(raw: str, cols: Optional[int] = None) -> str:
    """Turn a command's output string into printable, coloured text."""
    cols = cols or _term_cols()
    out = parse_output(raw)
    if isinstance(out, str):
        if out.startswith("Error"):
            return c(out, Fore.RED)
        if out.startswith("Usage:"):
            return c(out, Fore.YELLOW)
        return c(out, Fore.CYAN)
    if isinstance(out, TextOutput):
        return c(out.content, Fore.CYAN)
    if isinstance(out, ListOutput):
        return "\n".join(f"  {Fore.GREEN}•{Style.RESET_ALL} {item}" for item in out.items)
    if isinstance(out, GridOutput):
        return render_grid(out, cols)
    if isinstance(out, GrepOutput):
        return render_grep(out)
    if isinstance(out, MatrixOutput):
        return render_matrix(out)
    if isinstance(out, CoffeeOutput):
        return c(COFFEE_CUP + "\nCoffee break. Back in a minute.", Fore.YELLOW)
    if isinstance(out, MeltdownOutput):
        return c("KERNEL PANIC: just kidding.", Fore.RED)
    if isinstance(out, GameOutput):
        return c(f"[{out.game}] games are not available in this terminal.", Fore.MAGENTA)
    return raw


# ---------- Shell ----------
class ResumeShell(Cmd):
    intro = c("ResumeTerminal - type 'help' to list commands, 'exit' to leave.", Fore.MAGENTA)

    def __init__(self, session: TerminalSession, prompt_template: str = "guest@resume:{cwd}$ "):
        super().__init__()
        self.session = session
        self.prompt_template = prompt_template
        # the line as typed; Cmd strips it before dispatch
        self._raw_line = ""
        self._update_prompt()

    def _update_prompt(self) -> None:
        text = self.prompt_template.format(cwd=self.session.cwd)
        self.prompt = f"{Fore.GREEN}{text}{Style.RESET_ALL}"

    def _typed(self, line: str) -> str:
        return self._raw_line if self._raw_line.strip() == line.strip() else line

    @staticmethod
    def _forget(line: str) -> None:
        """Drop ``line`` from readline history if it is the newest entry."""
        if not readline:
            return
        length = readline.get_current_history_length()
        if length and readline.get_history_item(length) == line:
            readline.remove_history_item(length - 1)

    def _submit(self, line: str) -> None:
        recorded = len(self.session.history)
        output = self.session.submit(line)
        if len(self.session.history) == recorded:
            # readline only keeps lines the session recorded
            self._forget(line)
        if output == CLEAR_TERMINAL:
            print("\033c", end="")
            return
        print(render_output(output, _term_cols()))

    # ---- core overrides
    def preloop(self):
        if readline:
            # Cmd binds the completion key to "complete" after preloop; rebind
            # once input starts so repeated Tab cycles candidates.
            readline.set_startup_hook(self._bind_keys)

    def postloop(self):
        if readline:
            readline.set_startup_hook(None)

    @staticmethod
    def _bind_keys() -> None:
        try:
            doc = getattr(readline, "__doc__", "") or ""
            if "libedit" in doc:
                readline.parse_and_bind("bind ^I rl_complete")
            else:
                readline.parse_and_bind("tab: menu-complete")
                readline.parse_and_bind("set completion-ignore-case on")
        except Exception:
            logger.debug("readline key bindings unavailable", exc_info=True)

    def onecmd(self, line):
        self._raw_line = line
        return super().onecmd(line)

    def emptyline(self):
        return False

    def default(self, line: str):
        if not line.strip():
            return
        self._submit(self._typed(line))

    def postcmd(self, stop, line):
        self._update_prompt()
        return stop

    # help is a registered command; route it through the session like any other
    def do_help(self, arg):
        self._submit(self._typed(f"help {arg}".strip()))

    def do_refresh(self, arg):
        """Rebuild the filesystem and forget history."""
        self.session.refresh()
        if readline:
            readline.clear_history()
        print(c("Session refreshed.", Fore.MAGENTA))

    def do_exit(self, arg):
        """Exit the terminal."""
        self._forget(self._raw_line)
        print(c("Bye!", Fore.MAGENTA))
        return True

    do_quit = do_exit

    def do_EOF(self, arg):
        print()
        return self.do_exit(arg)

    # ---- tab completion
    def completenames(self, text, *ignored):
        names = [name for name, cmd in self.session.registry.items() if not cmd.hidden]
        return filter_matches(names, text)

    def completedefault(self, text: str, line: str, begidx: int, endidx: int):
        try:
            entries = list_directory(self.session.vfs)
        except PathError:
            return []
        return filter_matches(entries, text)

