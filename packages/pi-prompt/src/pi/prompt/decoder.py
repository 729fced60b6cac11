"""KeyDecoder turns raw terminal bytes into key events.

Input can arrive in partial chunks, especially for escape sequences such as
arrow keys and for multi-byte UTF-8 characters. ``decode`` reports
``NEED_MORE_BYTES`` for a prefix that is valid so far, so the caller can
append more input and retry. A byte that fits no known encoding raises
``DecodeError`` with ``consumed == 1`` so decoding resumes at the next byte.
"""

from __future__ import annotations

import logging
from typing import Literal

from pi.prompt.errors import DecodeError
from pi.prompt.keybindings import PromptKeybindingsManager, get_prompt_keybindings
from pi.prompt.keys import KeyEvent, KeyKind, is_printable_key, parse_key

logger = logging.getLogger(__name__)

ESC = 0x1B

_Status = Literal["complete", "incomplete", "invalid"]


class NeedMoreBytes:
    """Marker returned while a sequence is incomplete."""

    _instance: NeedMoreBytes | None = None

    def __new__(cls) -> NeedMoreBytes:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NEED_MORE_BYTES"


NEED_MORE_BYTES = NeedMoreBytes()


# ---------------------------------------------------------------------------
# Sequence framing
# ---------------------------------------------------------------------------


def _escape_sequence_length(data: bytes) -> tuple[_Status, int]:
    """Frame the escape sequence at the start of *data*.

    Returns the status and, when complete, the sequence length.
    """
    if len(data) == 1:
        return "incomplete", 0

    intro = data[1]

    # Alt-modified sequences: ESC ESC [ ... or ESC ESC O ...; a bare ESC ESC waits for flush
    if intro == ESC:
        if len(data) == 2:
            return "incomplete", 0
        if data[2] in (ord("["), ord("O")):
            status, length = _escape_sequence_length(data[1:])
            return status, (length + 1 if status == "complete" else 0)
        return "complete", 2

    # CSI sequences: ESC [ <params 0x30-0x3F> <intermediates 0x20-0x2F> <final 0x40-0x7E>
    if intro == ord("["):
        pos = 2
        while pos < len(data) and 0x30 <= data[pos] <= 0x3F:
            pos += 1
        while pos < len(data) and 0x20 <= data[pos] <= 0x2F:
            pos += 1
        if pos == len(data):
            return "incomplete", 0
        if 0x40 <= data[pos] <= 0x7E:
            return "complete", pos + 1
        return "invalid", 0

    # SS3 sequences: ESC O <final>
    if intro == ord("O"):
        if len(data) < 3:
            return "incomplete", 0
        if 0x40 <= data[2] <= 0x7E:
            return "complete", 3
        return "invalid", 0

    # Meta key sequences: ESC followed by a single character
    if intro < 0x80:
        return "complete", 2

    return "invalid", 0


def _utf8_sequence_length(data: bytes) -> tuple[_Status, int]:
    lead = data[0]
    if lead < 0x80:
        return "complete", 1
    if 0xC2 <= lead <= 0xDF:
        need = 2
    elif 0xE0 <= lead <= 0xEF:
        need = 3
    elif 0xF0 <= lead <= 0xF4:
        need = 4
    else:
        return "invalid", 0

    for pos in range(1, min(need, len(data))):
        if not 0x80 <= data[pos] <= 0xBF:
            return "invalid", 0
    if len(data) < need:
        return "incomplete", 0
    try:
        data[:need].decode("utf-8")
    except UnicodeDecodeError:
        # Overlong forms and surrogates
        return "invalid", 0
    return "complete", need


def frame(data: bytes) -> tuple[_Status, int]:
    """Frame the first key sequence in *data*."""
    if data[0] == ESC:
        return _escape_sequence_length(data)
    return _utf8_sequence_length(data)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def event_for_sequence(
    text: str, keybindings: PromptKeybindingsManager | None = None
) -> KeyEvent:
    """Map one complete input sequence onto a key event."""
    kb = keybindings or get_prompt_keybindings()
    key_id = parse_key(text)
    if key_id is not None:
        kind = kb.kind_for(key_id)
        if kind is not None:
            return KeyEvent(kind, key_id=key_id, raw=text)
    if is_printable_key(text):
        return KeyEvent.printable(text)
    return KeyEvent(KeyKind.UNRECOGNIZED, key_id=key_id, raw=text)


def decode(
    data: bytes, keybindings: PromptKeybindingsManager | None = None
) -> tuple[KeyEvent | NeedMoreBytes, int]:
    """Decode the first key event from *data*.

    Returns ``(event, consumed)`` or ``(NEED_MORE_BYTES, 0)``.

    Raises:
        DecodeError: for a prefix that can never become a valid key; its
            ``consumed`` attribute is 1.
    """
    if not data:
        return NEED_MORE_BYTES, 0

    status, length = frame(data)
    if status == "incomplete":
        return NEED_MORE_BYTES, 0
    if status == "invalid":
        raise DecodeError(bytes(data[:2]) if data[0] == ESC else bytes(data[:1]))

    text = data[:length].decode("utf-8")
    return event_for_sequence(text, keybindings), length


class KeyDecoder:
    """Buffers raw input and emits key events one at a time.

    Decode errors are logged, recorded for ``drain_errors`` and skipped over.
    """

    def __init__(self, keybindings: PromptKeybindingsManager | None = None) -> None:
        self._buffer = bytearray()
        self._errors: list[DecodeError] = []
        self._keybindings = keybindings

    @property
    def pending(self) -> bytes:
        """Bytes received but not yet decoded."""
        return bytes(self._buffer)

    def push(self, data: bytes) -> None:
        """Append raw input to the buffer."""
        self._buffer.extend(data)

    def next_event(self) -> KeyEvent | None:
        """Decode the next buffered event, or return ``None`` if more bytes are needed."""
        while self._buffer:
            try:
                result, consumed = decode(bytes(self._buffer), self._keybindings)
            except DecodeError as exc:
                logger.debug("Skipping undecodable input %r", exc.data)
                self._errors.append(exc)
                del self._buffer[: exc.consumed]
                continue
            if isinstance(result, NeedMoreBytes):
                return None
            del self._buffer[:consumed]
            return result
        return None

    def flush(self) -> list[KeyEvent]:
        """Resolve a partial sequence once the host has stopped waiting for more bytes.

        A lone ESC becomes the ``escape`` key and ESC ESC becomes
        ``alt+escape``. Anything else left pending, such as an unterminated
        escape sequence or a truncated UTF-8 character, is discarded as one
        decode error.
        """
        events: list[KeyEvent] = []
        while self._buffer:
            event = self.next_event()
            if event is not None:
                events.append(event)
                continue
            if not self._buffer:
                break
            pending = bytes(self._buffer)
            self._buffer.clear()
            if pending in (b"\x1b", b"\x1b\x1b"):
                events.append(event_for_sequence(pending.decode("ascii"), self._keybindings))
            else:
                exc = DecodeError(pending, len(pending))
                logger.debug("Discarding truncated input %r", exc.data)
                self._errors.append(exc)
        return events

    def drain_errors(self) -> list[DecodeError]:
        """Return and forget the decode errors recovered so far."""
        errors, self._errors = self._errors, []
        return errors

    def clear(self) -> None:
        self._buffer.clear()
        self._errors.clear()
