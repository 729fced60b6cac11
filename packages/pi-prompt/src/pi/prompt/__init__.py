"""pi-prompt: line-editing engine for shell-like interactive prompts."""

# Command-tree completion
from pi.prompt.commands import ArbitraryArgument, Command, CommandCompleter, Flag

# Completion
from pi.prompt.completion import (
    CompletionEngine,
    CompletionProvider,
    CompletionState,
    TriggerResult,
    longest_common_prefix,
)

# Editor state machine
from pi.prompt.controller import EditorController, EditorState, PromptOptions

# Input decoding
from pi.prompt.decoder import NEED_MORE_BYTES, KeyDecoder, NeedMoreBytes, decode

# Errors
from pi.prompt.errors import DecodeError, PromptError, ProviderError

# History
from pi.prompt.history import HistoryStore

# Keybindings
from pi.prompt.keybindings import (
    DEFAULT_PROMPT_KEYBINDINGS,
    PromptAction,
    PromptKeybindingsManager,
    get_prompt_keybindings,
    set_prompt_keybindings,
)

# Keys
from pi.prompt.keys import Key, KeyEvent, KeyId, KeyKind, parse_key

# Line buffer
from pi.prompt.line_buffer import BufferSnapshot, LineBuffer

# Argument splitting
from pi.prompt.split import EscapingState, split

# Outcomes
from pi.prompt.types import (
    CandidateView,
    Continue,
    Eof,
    Interrupted,
    Outcome,
    RenderInstruction,
    Submitted,
)

__all__ = [
    # Commands
    "ArbitraryArgument",
    "Command",
    "CommandCompleter",
    "Flag",
    # Completion
    "CompletionEngine",
    "CompletionProvider",
    "CompletionState",
    "TriggerResult",
    "longest_common_prefix",
    # Controller
    "EditorController",
    "EditorState",
    "PromptOptions",
    # Decoder
    "NEED_MORE_BYTES",
    "KeyDecoder",
    "NeedMoreBytes",
    "decode",
    # Errors
    "DecodeError",
    "PromptError",
    "ProviderError",
    # History
    "HistoryStore",
    # Keybindings
    "DEFAULT_PROMPT_KEYBINDINGS",
    "PromptAction",
    "PromptKeybindingsManager",
    "get_prompt_keybindings",
    "set_prompt_keybindings",
    # Keys
    "Key",
    "KeyEvent",
    "KeyId",
    "KeyKind",
    "parse_key",
    # Line buffer
    "BufferSnapshot",
    "LineBuffer",
    # Split
    "EscapingState",
    "split",
    # Outcomes
    "CandidateView",
    "Continue",
    "Eof",
    "Interrupted",
    "Outcome",
    "RenderInstruction",
    "Submitted",
]
