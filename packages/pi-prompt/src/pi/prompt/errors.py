"""Exceptions raised by the prompt engine.

None of these end an editing session: decode errors are recovered by
skipping the offending byte and provider errors leave the buffer untouched.
"""

from __future__ import annotations


class PromptError(Exception):
    """Base class for prompt engine errors."""


class DecodeError(PromptError):
    """Raised for a byte sequence that matches no known key encoding."""

    def __init__(self, data: bytes, consumed: int = 1) -> None:
        super().__init__(f"Cannot decode input {data!r}")
        self.data = data
        self.consumed = consumed


class ProviderError(PromptError):
    """Raised when the completion provider fails for a prefix."""

    def __init__(self, prefix: str, message: str | None = None) -> None:
        super().__init__(message or f"Completion provider failed for prefix {prefix!r}")
        self.prefix = prefix
