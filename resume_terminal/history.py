"""Command history with shell-style Up/Down recall."""

from typing import List, Optional


class CommandHistory:
    """Accepted input lines with an Up/Down recall cursor.

    The cursor is ``None`` while the user is typing a new line. ``previous``
    and ``next`` return the text the input should show, or ``None`` when
    nothing changes.
    """

    def __init__(self) -> None:
        self._entries: List[str] = []
        self._cursor: Optional[int] = None

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    @property
    def cursor(self) -> Optional[int]:
        return self._cursor

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, line: str) -> None:
        self._entries.append(line)
        self._cursor = None

    def previous(self) -> Optional[str]:
        if not self._entries:
            return None
        if self._cursor is None:
            self._cursor = len(self._entries) - 1
        else:
            self._cursor = max(self._cursor - 1, 0)
        return self._entries[self._cursor]

    def next(self) -> Optional[str]:
        if self._cursor is None:
            return None
        self._cursor += 1
        if self._cursor >= len(self._entries):
            # past the newest entry: back to an empty input line
            self._cursor = None
            return ""
        return self._entries[self._cursor]

    def reset_cursor(self) -> None:
        self._cursor = None

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = None
