"""LineBuffer - editable single-line text with a cursor."""

from __future__ import annotations

from dataclasses import dataclass

from pi.prompt.utils import get_segmenter, is_punctuation_char, is_whitespace_char, visible_width

_segmenter = get_segmenter()


@dataclass(frozen=True)
class BufferSnapshot:
    """Read view of a LineBuffer: its text and cursor index."""

    text: str = ""
    cursor: int = 0


class LineBuffer:
    """Editable text buffer with cursor position tracking.

    The cursor is an index into ``text`` and always satisfies
    ``0 <= cursor <= len(text)``. Left/right movement and single-character
    deletion step over whole grapheme clusters, so a combining sequence is
    never split.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._cursor = len(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def cursor_column(self) -> int:
        """Terminal display width of the text before the cursor."""
        return visible_width(self._text[: self._cursor])

    def __len__(self) -> int:
        return len(self._text)

    def view(self) -> BufferSnapshot:
        return BufferSnapshot(text=self._text, cursor=self._cursor)

    def restore(self, snapshot: BufferSnapshot) -> None:
        self._text = snapshot.text
        self._cursor = max(0, min(snapshot.cursor, len(snapshot.text)))

    # -- Insertion -----------------------------------------------------------

    def insert(self, text: str) -> None:
        """Insert text at the cursor and move the cursor past it."""
        self._text = self._text[: self._cursor] + text + self._text[self._cursor :]
        self._cursor += len(text)

    def set_text(self, text: str) -> None:
        """Replace buffer content and move cursor to end."""
        self._text = text
        self._cursor = len(text)

    def replace_span(self, start: int, end: int, text: str) -> None:
        """Replace ``text[start:end]`` and leave the cursor after the replacement."""
        start = max(0, min(start, len(self._text)))
        end = max(start, min(end, len(self._text)))
        self._text = self._text[:start] + text + self._text[end:]
        self._cursor = start + len(text)

    def clear(self) -> str:
        """Clear the buffer and return the previous content."""
        text = self._text
        self._text = ""
        self._cursor = 0
        return text

    # -- Deletion ------------------------------------------------------------

    def _grapheme_before(self) -> int:
        graphemes = _segmenter.segment(self._text[: self._cursor])
        return len(graphemes[-1]) if graphemes else 1

    def _grapheme_after(self) -> int:
        graphemes = _segmenter.segment(self._text[self._cursor :])
        return len(graphemes[0]) if graphemes else 1

    def backspace(self) -> bool:
        """Delete the character before the cursor. Returns whether anything changed."""
        if self._cursor == 0:
            return False
        gl = self._grapheme_before()
        self._text = self._text[: self._cursor - gl] + self._text[self._cursor :]
        self._cursor -= gl
        return True

    def delete(self) -> bool:
        """Delete the character at the cursor. Returns whether anything changed."""
        if self._cursor >= len(self._text):
            return False
        gl = self._grapheme_after()
        self._text = self._text[: self._cursor] + self._text[self._cursor + gl :]
        return True

    def delete_word_backward(self) -> str:
        """Delete from the cursor back to the start of the previous word."""
        if self._cursor == 0:
            return ""
        old_cursor = self._cursor
        self.move_word_left()
        deleted = self._text[self._cursor : old_cursor]
        self._text = self._text[: self._cursor] + self._text[old_cursor:]
        return deleted

    def delete_to_start(self) -> str:
        """Delete from the cursor to the start of the line."""
        deleted = self._text[: self._cursor]
        self._text = self._text[self._cursor :]
        self._cursor = 0
        return deleted

    def delete_to_end(self) -> str:
        """Delete from the cursor to the end of the line."""
        deleted = self._text[self._cursor :]
        self._text = self._text[: self._cursor]
        return deleted

    # -- Cursor movement -----------------------------------------------------

    def move_left(self) -> None:
        if self._cursor > 0:
            self._cursor -= self._grapheme_before()

    def move_right(self) -> None:
        if self._cursor < len(self._text):
            self._cursor += self._grapheme_after()

    def move_home(self) -> None:
        self._cursor = 0

    def move_end(self) -> None:
        self._cursor = len(self._text)

    def move_word_left(self) -> None:
        """Move to the start of the previous word or punctuation run."""
        graphemes = _segmenter.segment(self._text[: self._cursor])

        # Skip trailing whitespace
        while graphemes and is_whitespace_char(graphemes[-1]):
            self._cursor -= len(graphemes.pop())

        if graphemes:
            if is_punctuation_char(graphemes[-1]):
                while graphemes and is_punctuation_char(graphemes[-1]):
                    self._cursor -= len(graphemes.pop())
            else:
                while (
                    graphemes
                    and not is_whitespace_char(graphemes[-1])
                    and not is_punctuation_char(graphemes[-1])
                ):
                    self._cursor -= len(graphemes.pop())

    def move_word_right(self) -> None:
        """Move to the end of the next word or punctuation run."""
        graphemes = _segmenter.segment(self._text[self._cursor :])
        idx = 0

        # Skip leading whitespace
        while idx < len(graphemes) and is_whitespace_char(graphemes[idx]):
            self._cursor += len(graphemes[idx])
            idx += 1

        if idx < len(graphemes):
            if is_punctuation_char(graphemes[idx]):
                while idx < len(graphemes) and is_punctuation_char(graphemes[idx]):
                    self._cursor += len(graphemes[idx])
                    idx += 1
            else:
                while (
                    idx < len(graphemes)
                    and not is_whitespace_char(graphemes[idx])
                    and not is_punctuation_char(graphemes[idx])
                ):
                    self._cursor += len(graphemes[idx])
                    idx += 1
