"""CompletionEngine - tab completion of the word under the cursor.

The host supplies a provider, ``provider(prefix) -> candidates``. On the
first completion key:

* no candidates leaves the buffer alone,
* a single candidate replaces the prefix directly,
* several candidates extend the prefix to their longest common prefix and
  start a completion session whose highlighted candidate cycles on every
  further completion key.

A provider may also define ``complete_with_context(prefix, words)``, which
receives the arguments typed before the prefix, and ``describe(words)``,
which returns a hint for free-text arguments.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from pi.prompt.errors import ProviderError
from pi.prompt.line_buffer import BufferSnapshot, LineBuffer
from pi.prompt.split import split, word_start

logger = logging.getLogger(__name__)

CompletionProvider = Callable[[str], Sequence[str]]


def longest_common_prefix(candidates: Sequence[str]) -> str:
    """Return the longest string that prefixes every candidate."""
    if not candidates:
        return ""
    return os.path.commonprefix(list(candidates))


class TriggerResult(Enum):
    """What a completion key press did."""

    NO_MATCH = "no-match"
    ACCEPTED = "accepted"
    LISTED = "listed"
    CYCLED = "cycled"


@dataclass
class CompletionState:
    """An active multi-candidate completion session."""

    prefix: str
    candidates: tuple[str, ...]
    start: int
    end: int
    snapshot: BufferSnapshot
    selected: int = 0

    @property
    def selected_candidate(self) -> str:
        return self.candidates[self.selected]


class CompletionEngine:
    """Drives the candidate lifecycle for one LineBuffer."""

    def __init__(
        self,
        provider: CompletionProvider | None = None,
        *,
        append_space_on_unique: bool = False,
    ) -> None:
        self.provider = provider
        self.append_space_on_unique = append_space_on_unique
        self._state: CompletionState | None = None
        self.last_hint: str | None = None

    @property
    def state(self) -> CompletionState | None:
        return self._state

    @property
    def active(self) -> bool:
        return self._state is not None

    def trigger(self, buffer: LineBuffer) -> TriggerResult:
        """Handle a completion key press.

        Raises:
            ProviderError: if the provider fails; the buffer is unchanged and
                no session is started.
        """
        if self._state is not None:
            self._state.selected = (self._state.selected + 1) % len(self._state.candidates)
            return TriggerResult.CYCLED

        self.last_hint = None
        before = buffer.text[: buffer.cursor]
        start = word_start(before)
        # Providers see the word with its quotes and escapes resolved
        prefix = "".join(split(before[start:]))
        words = split(before[:start])

        candidates = self._query(prefix, words)
        if not candidates:
            self.last_hint = self._describe(prefix, words)
            return TriggerResult.NO_MATCH

        if len(candidates) == 1:
            suffix = " " if self.append_space_on_unique else ""
            buffer.replace_span(start, buffer.cursor, candidates[0] + suffix)
            return TriggerResult.ACCEPTED

        snapshot = buffer.view()
        lcp = longest_common_prefix(candidates)
        if len(lcp) > len(prefix) and lcp.startswith(prefix):
            buffer.replace_span(start, buffer.cursor, lcp)
        self._state = CompletionState(
            prefix=prefix,
            candidates=candidates,
            start=start,
            end=buffer.cursor,
            snapshot=snapshot,
        )
        return TriggerResult.LISTED

    def accept(self, buffer: LineBuffer) -> str | None:
        """Write the highlighted candidate into the buffer and end the session."""
        state = self._state
        if state is None:
            return None
        candidate = state.selected_candidate
        buffer.replace_span(state.start, state.end, candidate)
        self._state = None
        return candidate

    def cancel(self, buffer: LineBuffer | None = None) -> None:
        """End the session, restoring the pre-completion buffer when one is given."""
        if self._state is not None and buffer is not None:
            buffer.restore(self._state.snapshot)
        self._state = None

    def _query(self, prefix: str, words: list[str]) -> tuple[str, ...]:
        if self.provider is None:
            return ()
        contextual = getattr(self.provider, "complete_with_context", None)
        try:
            if callable(contextual):
                result = contextual(prefix, words)
            else:
                result = self.provider(prefix)
            if isinstance(result, str):
                raise TypeError("expected a sequence of strings, got a string")
            candidates = tuple(result or ())
        except Exception as exc:
            raise ProviderError(prefix) from exc
        for candidate in candidates:
            if not isinstance(candidate, str):
                raise ProviderError(
                    prefix, f"Completion provider returned non-string candidate {candidate!r}"
                )
        logger.debug("Provider returned %d candidates for %r", len(candidates), prefix)
        return candidates

    def _describe(self, prefix: str, words: list[str]) -> str | None:
        describe = getattr(self.provider, "describe", None)
        if not callable(describe):
            return None
        try:
            return describe(words)
        except Exception as exc:
            raise ProviderError(prefix) from exc
