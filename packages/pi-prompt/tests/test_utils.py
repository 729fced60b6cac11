"""Tests for pi.prompt.utils -- terminal text utilities."""

from __future__ import annotations

from pi.prompt.utils import (
    get_segmenter,
    is_punctuation_char,
    is_whitespace_char,
    visible_width,
)


class TestVisibleWidth:
    """Measure the terminal width of text."""

    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty_string(self) -> None:
        assert visible_width("") == 0

    def test_wide_cjk_characters_count_as_two(self) -> None:
        assert visible_width("日本") == 4

    def test_combining_mark_is_zero_width(self) -> None:
        assert visible_width("e\u0301") == 1

    def test_emoji_is_two_columns(self) -> None:
        assert visible_width("😀") == 2


class TestSegmenter:
    def test_combining_sequence_is_one_grapheme(self) -> None:
        assert get_segmenter().segment("ae\u0301") == ["a", "e\u0301"]


class TestCharClasses:
    def test_whitespace(self) -> None:
        assert is_whitespace_char(" ")
        assert is_whitespace_char("\t")
        assert not is_whitespace_char("a")

    def test_punctuation(self) -> None:
        assert is_punctuation_char(".")
        assert is_punctuation_char("-")
        assert not is_punctuation_char("a")
