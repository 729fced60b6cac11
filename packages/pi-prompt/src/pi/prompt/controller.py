"""EditorController - the line-editing state machine.

Consumes one key event at a time, applies it to the line buffer, history and
completion engine, and returns an outcome describing what the host should do
next: redraw (``Continue``), or handle a finished line, an interrupt or the
end of input. The controller never touches the terminal itself.

One controller serves one prompt. Hosts embedding several prompts create one
controller each.
"""

from __future__ import annotations

import dataclasses
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from pi.prompt.completion import CompletionEngine, CompletionProvider, TriggerResult
from pi.prompt.decoder import KeyDecoder
from pi.prompt.errors import PromptError, ProviderError
from pi.prompt.history import HistoryStore
from pi.prompt.keybindings import PromptKeybindingsManager
from pi.prompt.keys import KeyEvent, KeyKind
from pi.prompt.line_buffer import LineBuffer
from pi.prompt.split import split
from pi.prompt.types import (
    CandidateView,
    Continue,
    Eof,
    Interrupted,
    Outcome,
    RenderInstruction,
    Submitted,
)

logger = logging.getLogger(__name__)


class EditorState(Enum):
    IDLE = "idle"
    COMPLETING = "completing"


@dataclass
class PromptOptions:
    prompt: str = "> "
    history_size: int = 1000
    append_space_on_unique: bool = False
    # Editing a recalled history entry stops browsing
    end_browse_on_edit: bool = True


# Buffer edits: handler, and whether it can change the text
_EDITS: dict[KeyKind, tuple[Callable[[LineBuffer], object], bool]] = {
    KeyKind.BACKSPACE: (LineBuffer.backspace, True),
    KeyKind.DELETE: (LineBuffer.delete, True),
    KeyKind.DELETE_WORD_BACKWARD: (LineBuffer.delete_word_backward, True),
    KeyKind.DELETE_TO_LINE_START: (LineBuffer.delete_to_start, True),
    KeyKind.DELETE_TO_LINE_END: (LineBuffer.delete_to_end, True),
    KeyKind.CURSOR_LEFT: (LineBuffer.move_left, False),
    KeyKind.CURSOR_RIGHT: (LineBuffer.move_right, False),
    KeyKind.CURSOR_HOME: (LineBuffer.move_home, False),
    KeyKind.CURSOR_END: (LineBuffer.move_end, False),
    KeyKind.CURSOR_WORD_LEFT: (LineBuffer.move_word_left, False),
    KeyKind.CURSOR_WORD_RIGHT: (LineBuffer.move_word_right, False),
}


class EditorController:
    """Line editor with history recall and tab completion."""

    def __init__(
        self,
        completion_provider: CompletionProvider | None = None,
        options: PromptOptions | None = None,
        *,
        keybindings: PromptKeybindingsManager | None = None,
        history: Iterable[str] | None = None,
    ) -> None:
        if options is None:
            options = PromptOptions()
        self.options = options

        self._buffer = LineBuffer()
        self._history = HistoryStore(max_size=max(1, options.history_size))
        self._completion = CompletionEngine(
            completion_provider,
            append_space_on_unique=options.append_space_on_unique,
        )
        self._decoder = KeyDecoder(keybindings)
        self._queued: deque[KeyEvent] = deque()

        if history is not None:
            self._history.load(history)

    # -- Accessors -----------------------------------------------------------

    @property
    def state(self) -> EditorState:
        return EditorState.COMPLETING if self._completion.active else EditorState.IDLE

    @property
    def buffer(self) -> LineBuffer:
        return self._buffer

    @property
    def history(self) -> HistoryStore:
        return self._history

    @property
    def completion(self) -> CompletionEngine:
        return self._completion

    @property
    def has_pending(self) -> bool:
        """Whether input is buffered that a later ``feed`` or ``flush`` will process."""
        return bool(self._queued) or bool(self._decoder.pending)

    def set_completion_provider(self, provider: CompletionProvider | None) -> None:
        self._completion.cancel()
        self._completion.provider = provider

    def render(self) -> RenderInstruction:
        state = self._completion.state
        candidates = (
            CandidateView(items=state.candidates, selected=state.selected)
            if state is not None
            else None
        )
        return RenderInstruction(
            prompt=self.options.prompt,
            text=self._buffer.text,
            cursor=self._buffer.cursor,
            cursor_column=self._buffer.cursor_column,
            candidates=candidates,
        )

    # -- History persistence ---------------------------------------------------

    def snapshot_history(self) -> list[str]:
        return self._history.snapshot()

    def load_history(self, entries: Iterable[str]) -> None:
        self._history.load(entries)

    # -- Raw input -------------------------------------------------------------

    def feed(self, data: bytes | str) -> Outcome:
        """Process raw terminal input.

        Stops at the first submitted line, interrupt or end of input and
        returns it; input after that point stays buffered for the next call.
        Otherwise returns ``Continue`` with the current render instruction.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._decoder.push(data)
        return self._drain()

    def feed_all(self, data: bytes | str) -> list[Outcome]:
        """Process all of *data*, returning every terminal outcome and a final ``Continue``."""
        outcomes = [self.feed(data)]
        while not isinstance(outcomes[-1], Continue):
            outcomes.append(self.feed(b""))
        return outcomes

    def flush(self) -> Outcome:
        """Resolve buffered partial input, e.g. a lone ESC after the host's read timeout."""
        self._queued.extend(self._decoder.flush())
        return self._drain()

    def _next_event(self) -> KeyEvent | None:
        if self._queued:
            return self._queued.popleft()
        return self._decoder.next_event()

    def _drain(self) -> Outcome:
        last: Continue | None = None
        error: PromptError | None = None
        while True:
            event = self._next_event()
            if event is None:
                break
            outcome = self.handle_key(event)
            if not isinstance(outcome, Continue):
                return outcome
            last = outcome
            error = error or outcome.error

        result = last or Continue(render=self.render())
        errors = tuple(self._decoder.drain_errors())
        if errors or error is not result.error:
            result = dataclasses.replace(result, error=error, errors=result.errors + errors)
        return result

    # -- Key events ------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> Outcome:
        """Apply one key event."""
        kind = event.kind

        if kind is KeyKind.UNRECOGNIZED:
            return self._continue()
        if kind is KeyKind.COMPLETE:
            return self._complete()
        if kind is KeyKind.SUBMIT:
            return self._submit()
        if kind is KeyKind.INTERRUPT:
            self._reset_line()
            return Interrupted()
        if kind is KeyKind.EOF:
            self._completion.cancel()
            return Eof()

        # Any other key ends a completion session
        self._completion.cancel()

        if kind is KeyKind.HISTORY_PREV or kind is KeyKind.HISTORY_NEXT:
            self._history.begin_browse(self._buffer.text)
            if kind is KeyKind.HISTORY_PREV:
                text = self._history.prev()
            else:
                text = self._history.next()
            self._buffer.set_text(text)
            return self._continue()

        if kind is KeyKind.PRINTABLE:
            if event.char:
                self._buffer.insert(event.char)
                self._edited()
            return self._continue()

        handler, edits = _EDITS[kind]
        before = self._buffer.text
        handler(self._buffer)
        if edits and self._buffer.text != before:
            self._edited()
        return self._continue()

    def accept_completion(self) -> Outcome:
        """Write the highlighted candidate into the line and end completion."""
        self._completion.accept(self._buffer)
        return self._continue()

    def cancel_completion(self, restore: bool = False) -> Outcome:
        """End completion, optionally restoring the line as it was before it began."""
        self._completion.cancel(self._buffer if restore else None)
        return self._continue()

    def reset(self) -> None:
        """Discard the current line, completion, browse state and buffered input."""
        self._reset_line()
        self._decoder.clear()
        self._queued.clear()

    # -- Internal helpers --------------------------------------------------------

    def _continue(self, **kwargs: object) -> Continue:
        return Continue(render=self.render(), **kwargs)  # type: ignore[arg-type]

    def _edited(self) -> None:
        if self.options.end_browse_on_edit:
            self._history.end_browse()

    def _reset_line(self) -> None:
        self._buffer.clear()
        self._completion.cancel()
        self._history.end_browse()

    def _complete(self) -> Continue:
        before = self._buffer.text
        try:
            result = self._completion.trigger(self._buffer)
        except ProviderError as exc:
            logger.warning("Completion failed for %r: %s", exc.prefix, exc.__cause__ or exc)
            return self._continue(error=exc)
        if result is TriggerResult.NO_MATCH:
            return self._continue(no_match=True, hint=self._completion.last_hint)
        if self._buffer.text != before:
            self._edited()
        return self._continue()

    def _submit(self) -> Submitted:
        line = self._buffer.text
        self._history.push(line)
        self._reset_line()
        logger.debug("Submitted line %r", line)
        return Submitted(line=line, args=tuple(split(line)))
