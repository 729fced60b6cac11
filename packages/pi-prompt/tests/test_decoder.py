"""Tests for pi.prompt.decoder -- raw bytes to key events."""

from __future__ import annotations

import pytest

from pi.prompt.decoder import NEED_MORE_BYTES, KeyDecoder, decode
from pi.prompt.errors import DecodeError
from pi.prompt.keybindings import PromptKeybindingsManager
from pi.prompt.keys import KeyEvent, KeyKind


# ---------------------------------------------------------------------------
# decode()
# ---------------------------------------------------------------------------


class TestDecode:
    """decode() reports the first event and how many bytes it used."""

    def test_printable_ascii(self) -> None:
        event, consumed = decode(b"ab")
        assert event == KeyEvent.printable("a")
        assert consumed == 1

    def test_multibyte_utf8(self) -> None:
        event, consumed = decode("é!".encode("utf-8"))
        assert event == KeyEvent.printable("é")
        assert consumed == 2

    def test_four_byte_utf8(self) -> None:
        event, consumed = decode("😀".encode("utf-8"))
        assert event.kind is KeyKind.PRINTABLE
        assert consumed == 4

    @pytest.mark.parametrize(
        ("data", "kind", "consumed"),
        [
            (b"\r", KeyKind.SUBMIT, 1),
            (b"\n", KeyKind.SUBMIT, 1),
            (b"\t", KeyKind.COMPLETE, 1),
            (b"\x7f", KeyKind.BACKSPACE, 1),
            (b"\x08", KeyKind.BACKSPACE, 1),
            (b"\x03", KeyKind.INTERRUPT, 1),
            (b"\x04", KeyKind.EOF, 1),
            (b"\x01", KeyKind.CURSOR_HOME, 1),
            (b"\x05", KeyKind.CURSOR_END, 1),
            (b"\x15", KeyKind.DELETE_TO_LINE_START, 1),
            (b"\x0b", KeyKind.DELETE_TO_LINE_END, 1),
            (b"\x17", KeyKind.DELETE_WORD_BACKWARD, 1),
            (b"\x1b[A", KeyKind.HISTORY_PREV, 3),
            (b"\x1b[B", KeyKind.HISTORY_NEXT, 3),
            (b"\x1b[C", KeyKind.CURSOR_RIGHT, 3),
            (b"\x1b[D", KeyKind.CURSOR_LEFT, 3),
            (b"\x1bOA", KeyKind.HISTORY_PREV, 3),
            (b"\x1b[H", KeyKind.CURSOR_HOME, 3),
            (b"\x1b[F", KeyKind.CURSOR_END, 3),
            (b"\x1b[3~", KeyKind.DELETE, 4),
            (b"\x1b[1;5D", KeyKind.CURSOR_WORD_LEFT, 6),
            (b"\x1b\x7f", KeyKind.DELETE_WORD_BACKWARD, 2),
            (b"\x1bf", KeyKind.CURSOR_WORD_RIGHT, 2),
            (b"\x1b\x1b[D", KeyKind.CURSOR_WORD_LEFT, 4),
            (b"\x1b\x1bOC", KeyKind.CURSOR_WORD_RIGHT, 4),
        ],
    )
    def test_bound_keys(self, data: bytes, kind: KeyKind, consumed: int) -> None:
        event, used = decode(data)
        assert isinstance(event, KeyEvent)
        assert event.kind is kind
        assert used == consumed

    def test_sequence_followed_by_more_input(self) -> None:
        event, consumed = decode(b"\x1b[Axyz")
        assert event.kind is KeyKind.HISTORY_PREV
        assert consumed == 3

    def test_space_is_printable(self) -> None:
        event, _ = decode(b" ")
        assert event == KeyEvent.printable(" ")

    @pytest.mark.parametrize("data", [b"", b"\x1b", b"\x1b[", b"\x1b[1;5", b"\x1bO", b"\x1b\x1b", b"\x1b\x1b[", b"\xc3", b"\xe6\x97"])
    def test_incomplete_prefix(self, data: bytes) -> None:
        assert decode(data) == (NEED_MORE_BYTES, 0)

    def test_well_formed_unknown_sequence(self) -> None:
        event, consumed = decode(b"\x1b[15~")
        assert event.kind is KeyKind.UNRECOGNIZED
        assert event.key_id == "f5"
        assert consumed == 5

    def test_unknown_csi_sequence(self) -> None:
        event, consumed = decode(b"\x1b[99~")
        assert event.kind is KeyKind.UNRECOGNIZED
        assert consumed == 5

    def test_unbound_meta_key(self) -> None:
        event, consumed = decode(b"\x1bx")
        assert event.kind is KeyKind.UNRECOGNIZED
        assert consumed == 2

    @pytest.mark.parametrize("data", [b"\xff", b"\x80abc", b"\xc3A", b"\xc0\xaf"])
    def test_invalid_bytes(self, data: bytes) -> None:
        with pytest.raises(DecodeError) as excinfo:
            decode(data)
        assert excinfo.value.consumed == 1
        assert excinfo.value.data == data[:1]

    def test_invalid_escape_sequence(self) -> None:
        with pytest.raises(DecodeError) as excinfo:
            decode(b"\x1b[1\x01")
        assert excinfo.value.consumed == 1
        assert excinfo.value.data == b"\x1b["

    def test_custom_keybindings(self) -> None:
        manager = PromptKeybindingsManager({"endOfInput": "ctrl+q"})
        event, _ = decode(b"\x11", manager)
        assert event.kind is KeyKind.EOF
        event, _ = decode(b"\x04", manager)
        assert event.kind is KeyKind.UNRECOGNIZED


# ---------------------------------------------------------------------------
# KeyDecoder
# ---------------------------------------------------------------------------


def drain(decoder: KeyDecoder) -> list[KeyEvent]:
    events = []
    while True:
        event = decoder.next_event()
        if event is None:
            return events
        events.append(event)


class TestKeyDecoder:
    """KeyDecoder buffers partial input across pushes."""

    def test_events_in_order(self) -> None:
        decoder = KeyDecoder()
        decoder.push(b"hi\r")
        kinds = [e.kind for e in drain(decoder)]
        assert kinds == [KeyKind.PRINTABLE, KeyKind.PRINTABLE, KeyKind.SUBMIT]

    def test_sequence_split_across_pushes(self) -> None:
        decoder = KeyDecoder()
        decoder.push(b"\x1b[")
        assert decoder.next_event() is None
        assert decoder.pending == b"\x1b["
        decoder.push(b"A")
        event = decoder.next_event()
        assert event is not None
        assert event.kind is KeyKind.HISTORY_PREV
        assert decoder.pending == b""

    def test_utf8_split_across_pushes(self) -> None:
        data = "日".encode("utf-8")
        decoder = KeyDecoder()
        decoder.push(data[:1])
        assert decoder.next_event() is None
        decoder.push(data[1:])
        assert decoder.next_event() == KeyEvent.printable("日")

    def test_invalid_bytes_are_skipped_and_recorded(self) -> None:
        decoder = KeyDecoder()
        decoder.push(b"a\xffb")
        assert [e.char for e in drain(decoder)] == ["a", "b"]
        errors = decoder.drain_errors()
        assert len(errors) == 1
        assert errors[0].data == b"\xff"
        assert decoder.drain_errors() == []

    def test_flush_lone_escape(self) -> None:
        decoder = KeyDecoder()
        decoder.push(b"\x1b")
        assert decoder.next_event() is None
        events = decoder.flush()
        assert len(events) == 1
        assert events[0].key_id == "escape"
        assert events[0].kind is KeyKind.UNRECOGNIZED
        assert decoder.pending == b""

    @pytest.mark.parametrize("data", [b"\x1b[", b"\x1b[1;", b"\x1bO", b"\x1b\x1b[1;3"])
    def test_flush_unterminated_sequence(self, data: bytes) -> None:
        decoder = KeyDecoder()
        decoder.push(b"a" + data)
        assert [e.char for e in drain(decoder)] == ["a"]
        assert decoder.flush() == []
        assert decoder.pending == b""
        assert [e.data for e in decoder.drain_errors()] == [data]

    def test_flush_double_escape(self) -> None:
        decoder = KeyDecoder()
        decoder.push(b"\x1b\x1b")
        assert decoder.next_event() is None
        assert [e.key_id for e in decoder.flush()] == ["alt+escape"]

    def test_flush_truncated_utf8(self) -> None:
        decoder = KeyDecoder()
        decoder.push(b"\xe6\x97")
        assert decoder.flush() == []
        assert decoder.pending == b""
        assert [e.data for e in decoder.drain_errors()] == [b"\xe6\x97"]

    def test_flush_with_nothing_pending(self) -> None:
        assert KeyDecoder().flush() == []

    def test_clear(self) -> None:
        decoder = KeyDecoder()
        decoder.push(b"\x1b[")
        decoder.clear()
        assert decoder.pending == b""
