"""Quote-aware splitting of command lines into arguments.

Whitespace separates arguments unless it is escaped by single quotes,
double quotes or a backslash, so ``print "A B" C`` splits into
``["print", "A B", "C"]``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EscapingState:
    """Quoting state after consuming some prefix of a command line.

    >>> EscapingState.process('cmd "some string').whitespace_escaped()
    True
    """

    single_quote: bool = False
    double_quote: bool = False
    backslash: bool = False

    def step(self, ch: str) -> None:
        """Advance the state by one character."""
        if ch == '"' and not self.doublequote_escaped():
            self.double_quote = not self.double_quote
        elif ch == "'" and not self.singlequote_escaped():
            self.single_quote = not self.single_quote

        if self.backslash:
            self.backslash = False
        elif ch == "\\":
            self.backslash = True

    def whitespace_escaped(self) -> bool:
        """Would a following whitespace be part of the current argument?"""
        return self.single_quote or self.double_quote or self.backslash

    def doublequote_escaped(self) -> bool:
        """Would a following ``"`` be literal rather than open/close a string?"""
        return self.single_quote or self.backslash

    def singlequote_escaped(self) -> bool:
        """Would a following ``'`` be literal rather than open/close a string?"""
        return self.double_quote or self.backslash

    def backslash_escaped(self) -> bool:
        """Would a following backslash be literal rather than escape?"""
        return self.double_quote or self.backslash

    @classmethod
    def process(cls, line: str) -> EscapingState:
        state = cls()
        for ch in line:
            state.step(ch)
        return state


def split(line: str) -> list[str]:
    """Split a command line into arguments, honouring quotes and backslashes."""
    parts: list[str] = []
    current: list[str] = []
    state = EscapingState()

    for ch in line:
        if not state.whitespace_escaped() and ch.isspace():
            if current:
                parts.append("".join(current))
                current = []
            continue

        if ch == '"':
            if state.doublequote_escaped():
                current.append(ch)
        elif ch == "'":
            if state.singlequote_escaped():
                current.append(ch)
        elif ch == "\\":
            if state.backslash_escaped():
                current.append(ch)
        else:
            current.append(ch)
        state.step(ch)

    if current:
        parts.append("".join(current))
    return parts


def word_start(text: str) -> int:
    """Return the index where the last (possibly partial) argument of *text* starts."""
    start = 0
    state = EscapingState()
    for i, ch in enumerate(text):
        if not state.whitespace_escaped() and ch.isspace():
            start = i + 1
            continue
        state.step(ch)
    return start
