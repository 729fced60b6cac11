"""HistoryStore - submitted lines with transient up/down browsing."""

from __future__ import annotations

from typing import Iterable


class HistoryStore:
    """Tracks submitted lines, oldest first, and a browse cursor.

    Browsing never changes the stored entries. While browsing, the cursor
    ranges over ``0..len(entries)``, where ``len(entries)`` is the
    "not yet showing history" position set by ``begin_browse``. Moving back
    past the newest entry ends browsing and returns the text the user was
    typing when browsing began.
    """

    def __init__(self, max_size: int = 1000) -> None:
        self._entries: list[str] = []
        self._max_size = max_size
        self._index: int | None = None  # None means not browsing
        self._saved_input = ""

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    @property
    def is_browsing(self) -> bool:
        return self._index is not None

    @property
    def browse_index(self) -> int | None:
        return self._index

    @property
    def saved_input(self) -> str:
        return self._saved_input

    def push(self, line: str) -> bool:
        """Append a line. Skip empty lines and consecutive duplicates."""
        if not line:
            return False
        if self._entries and self._entries[-1] == line:
            return False
        self._entries.append(line)
        if len(self._entries) > self._max_size:
            del self._entries[: len(self._entries) - self._max_size]
        return True

    def begin_browse(self, current_input: str) -> None:
        """Start browsing, remembering the in-progress input. No-op if already browsing."""
        if self._index is not None:
            return
        self._saved_input = current_input
        self._index = len(self._entries)

    def prev(self) -> str:
        """Move to an older entry (clamped at the oldest) and return its text.

        Starts browsing when not already browsing, keeping the saved input.
        """
        if not self._entries:
            return self._saved_input
        index = len(self._entries) if self._index is None else self._index
        self._index = max(index - 1, 0)
        return self._entries[self._index]

    def next(self) -> str:
        """Move to a newer entry, or past the newest back to the saved input.

        Moving past the newest entry ends browsing.
        """
        if self._index is None:
            return self._saved_input
        if self._index < len(self._entries) - 1:
            self._index += 1
            return self._entries[self._index]
        # Past the newest entry: browsing ends, the saved input stays
        self._index = None
        return self._saved_input

    def end_browse(self) -> None:
        """Discard browse state."""
        self._index = None
        self._saved_input = ""

    def snapshot(self) -> list[str]:
        return list(self._entries)

    def load(self, entries: Iterable[str]) -> None:
        """Replace stored entries, applying the same rules as ``push``."""
        self.end_browse()
        self._entries = []
        for entry in entries:
            self.push(entry)
