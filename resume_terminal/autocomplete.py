"""Tab completion that cycles through candidates.

The first Tab replaces the last word of the input with the first candidate
that starts with it. Further Tabs keep the original prefix and step through
the remaining candidates, wrapping around. Any other key ends the cycle.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .commands import CommandRegistry
from .vfs import VFS, PathError, list_directory


class Key(Enum):
    TAB = "tab"
    ARROW_UP = "arrow_up"
    ARROW_DOWN = "arrow_down"
    CHARACTER = "character"
    BACKSPACE = "backspace"
    INTERRUPT = "interrupt"
    CLEAR_SCREEN = "clear_screen"


@dataclass(frozen=True)
class KeyEvent:
    key: Key
    char: str = ""


@dataclass(frozen=True)
class AutocompleteSession:
    prefix: Optional[str] = None
    matches: Tuple[str, ...] = ()
    index: int = 0

    @property
    def active(self) -> bool:
        return self.prefix is not None


EMPTY_SESSION = AutocompleteSession()

_CONTROL_CHARS = re.compile(r"[\x00-\x1f]")


def strip_control(text: str) -> str:
    """Drop ASCII control characters (escape, bell, tab, newline and so on)."""
    return _CONTROL_CHARS.sub("", text)


def filter_matches(candidates: Sequence[str], prefix: str) -> List[str]:
    """Candidates starting with ``prefix`` (any case), in their original order."""
    lowered = prefix.lower()
    return [c for c in candidates if c.lower().startswith(lowered)]


def _replace_last(tokens: List[str], value: str) -> str:
    return " ".join(tokens[:-1] + [value])


def complete(session: AutocompleteSession, text: str,
             candidates: Sequence[str]) -> Tuple[AutocompleteSession, str]:
    """Handle one Tab press.

    Splitting on single spaces gives a trailing empty word when the input
    ends with a space, which completes a fresh word. Returns the new session
    and the new input text; with no match both come back unchanged.
    """
    tokens = text.split(" ")
    prefix = session.prefix if session.active else tokens[-1]
    matches = tuple(filter_matches(candidates, prefix))
    if not matches:
        return session, text
    if matches != session.matches or prefix != session.prefix:
        return AutocompleteSession(prefix, matches, 0), _replace_last(tokens, matches[0])
    index = (session.index + 1) % len(matches)
    return AutocompleteSession(prefix, matches, index), _replace_last(tokens, matches[index])


def reduce(session: AutocompleteSession, event: KeyEvent, text: str,
           candidates: Sequence[str]) -> Tuple[AutocompleteSession, str]:
    """Apply a keystroke to the input line.

    Only Tab keeps a completion cycle alive. Arrow keys do not edit the line
    here (history recall belongs to the caller) but still end the cycle.
    """
    if event.key is Key.TAB:
        return complete(session, text, candidates)
    if event.key is Key.CHARACTER:
        return EMPTY_SESSION, text + strip_control(event.char)
    if event.key is Key.BACKSPACE:
        return EMPTY_SESSION, text[:-1]
    return EMPTY_SESSION, text


def candidates_for(text: str, registry: CommandRegistry, vfs: VFS) -> List[str]:
    """Command names for the first word, current directory entries after it."""
    # leading spaces do not start a second word
    if len(text.lstrip(" ").split(" ")) == 1:
        return [name for name, cmd in registry.items() if not cmd.hidden]
    try:
        return list_directory(vfs)
    except PathError:
        return []
