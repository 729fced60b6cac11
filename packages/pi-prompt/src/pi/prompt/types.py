"""Render instructions and per-key outcomes returned to the host."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from pi.prompt.errors import DecodeError, PromptError


@dataclass(frozen=True)
class CandidateView:
    """Completion candidates to display, with the highlighted index."""

    items: tuple[str, ...]
    selected: int

    @property
    def selected_item(self) -> str:
        return self.items[self.selected]


@dataclass(frozen=True)
class RenderInstruction:
    """Everything the host needs to redraw the prompt line."""

    prompt: str
    text: str
    cursor: int
    cursor_column: int
    candidates: CandidateView | None = None


@dataclass(frozen=True)
class Continue:
    """Editing goes on; redraw from ``render``."""

    render: RenderInstruction
    no_match: bool = False
    hint: str | None = None
    error: PromptError | None = None
    errors: tuple[DecodeError, ...] = ()


@dataclass(frozen=True)
class Submitted:
    """A finished line. ``args`` is its quote-aware split."""

    line: str
    args: tuple[str, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class Interrupted:
    """The user pressed the interrupt key; the line was discarded."""


@dataclass(frozen=True)
class Eof:
    """The user ended input."""


Outcome = Union[Continue, Submitted, Interrupted, Eof]
