"""Logical key events and terminal key identification.

Raw terminal input is first identified as a key identifier such as
``"ctrl+a"``, ``"alt+backspace"`` or ``"up"`` (see ``parse_key``), which the
keybindings manager then maps onto one of the closed set of ``KeyKind``
values the editor understands.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str


# ---------------------------------------------------------------------------
# Logical key events
# ---------------------------------------------------------------------------


class KeyKind(Enum):
    """Every kind of key event the editor controller handles."""

    PRINTABLE = "printable"
    BACKSPACE = "backspace"
    DELETE = "delete"
    CURSOR_LEFT = "cursor-left"
    CURSOR_RIGHT = "cursor-right"
    CURSOR_HOME = "cursor-home"
    CURSOR_END = "cursor-end"
    CURSOR_WORD_LEFT = "cursor-word-left"
    CURSOR_WORD_RIGHT = "cursor-word-right"
    DELETE_WORD_BACKWARD = "delete-word-backward"
    DELETE_TO_LINE_START = "delete-to-line-start"
    DELETE_TO_LINE_END = "delete-to-line-end"
    HISTORY_PREV = "history-prev"
    HISTORY_NEXT = "history-next"
    COMPLETE = "complete"
    SUBMIT = "submit"
    INTERRUPT = "interrupt"
    EOF = "eof"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key press.

    ``char`` is only set for printable events. ``key_id`` and ``raw`` record
    what the event was decoded from and are informational.
    """

    kind: KeyKind
    char: str = ""
    key_id: KeyId | None = None
    raw: str = ""

    @classmethod
    def printable(cls, char: str) -> KeyEvent:
        return cls(KeyKind.PRINTABLE, char=char, key_id=char, raw=char)

    @classmethod
    def of(cls, kind: KeyKind) -> KeyEvent:
        return cls(kind)


# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"

    @staticmethod
    def ctrl_alt(key: str) -> str:
        return f"ctrl+alt+{key}"


# ---------------------------------------------------------------------------
# Legacy escape sequences
# ---------------------------------------------------------------------------

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1bOP": "f1",
    "\x1bOQ": "f2",
    "\x1bOR": "f3",
    "\x1bOS": "f4",
    "\x1b[15~": "f5",
    "\x1b[17~": "f6",
    "\x1b[18~": "f7",
    "\x1b[19~": "f8",
    "\x1b[20~": "f9",
    "\x1b[21~": "f10",
    "\x1b[23~": "f11",
    "\x1b[24~": "f12",
    "\x1b[E": "clear",
}

_CSI_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

_CSI_TILDE_KEYS: dict[int, str] = {
    2: "insert",
    3: "delete",
    5: "pageUp",
    6: "pageDown",
}


def _modified_sequences(param: int) -> dict[str, str]:
    """Build the xterm ``CSI 1;<param>X`` / ``CSI n;<param>~`` table."""
    table = {f"\x1b[1;{param}{letter}": name for letter, name in _CSI_LETTER_KEYS.items()}
    for number, name in _CSI_TILDE_KEYS.items():
        table[f"\x1b[{number};{param}~"] = name
    return table


LEGACY_SHIFT_SEQUENCES: dict[str, str] = {**_modified_sequences(2), "\x1b[Z": "tab"}
LEGACY_ALT_SEQUENCES: dict[str, str] = _modified_sequences(3)
LEGACY_CTRL_SEQUENCES: dict[str, str] = {
    **_modified_sequences(5),
    # rxvt
    "\x1bOc": "right",
    "\x1bOd": "left",
}
LEGACY_CTRL_ALT_SEQUENCES: dict[str, str] = _modified_sequences(7)


def parse_key(data: str) -> KeyId | None:  # noqa: C901
    """Parse one complete chunk of terminal input into a key identifier.

    Returns ``None`` when the input is not a key this module knows about.
    The returned string looks like ``"a"``, ``"ctrl+a"``, ``"alt+backspace"``
    or ``"up"``.
    """
    if not data:
        return None

    # Modified sequences first (they are longer / more specific)
    for seq_dict, mod_prefix in (
        (LEGACY_CTRL_ALT_SEQUENCES, "ctrl+alt+"),
        (LEGACY_CTRL_SEQUENCES, "ctrl+"),
        (LEGACY_SHIFT_SEQUENCES, "shift+"),
        (LEGACY_ALT_SEQUENCES, "alt+"),
        (LEGACY_KEY_SEQUENCES, ""),
    ):
        if data in seq_dict:
            return mod_prefix + seq_dict[data]

    # --- Alt via an extra ESC prefix (ESC ESC [ A) ---
    if len(data) > 2 and data.startswith("\x1b\x1b"):
        inner = parse_key(data[1:])
        if inner is None or "alt+" in inner:
            return inner
        if inner.startswith("ctrl+"):
            return "ctrl+alt+" + inner[len("ctrl+"):]
        return "alt+" + inner

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return "escape"
    if data == "\r" or data == "\n":
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data == "\x7f" or data == "\x08":
        return "backspace"
    if data == "\x00":
        return "ctrl+space"
    if data == "\x1f":
        return "ctrl+-"

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        if ch == "\x1b":
            return "alt+escape"
        if ch == "\r" or ch == "\n":
            return "alt+enter"
        if ch == "\t":
            return "alt+tab"
        if ch == " ":
            return "alt+space"
        if ch == "\x7f" or ch == "\x08":
            return "alt+backspace"
        if 1 <= ord(ch) <= 26:
            return "ctrl+alt+" + chr(ord(ch) + ord("a") - 1)
        if ch.isupper():
            return "shift+alt+" + ch.lower()
        if ch.isprintable():
            return "alt+" + ch.lower()

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return data

    return None


def is_printable_key(data: str) -> bool:
    """Return ``True`` if *data* is a single character to insert as text."""
    return len(data) == 1 and (data == " " or data.isprintable())
