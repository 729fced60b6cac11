"""Prompt keybindings manager."""

from __future__ import annotations

from typing import Literal

from pi.prompt.keys import KeyId, KeyKind, parse_key

PromptAction = Literal[
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorWordLeft",
    "cursorWordRight",
    "cursorLineStart",
    "cursorLineEnd",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
    "deleteToLineStart",
    "deleteToLineEnd",
    # History
    "historyPrev",
    "historyNext",
    # Completion
    "complete",
    # Line control
    "submit",
    "interrupt",
    "endOfInput",
]

PromptKeybindingsConfig = dict[PromptAction, KeyId | list[KeyId]]

DEFAULT_PROMPT_KEYBINDINGS: dict[PromptAction, KeyId | list[KeyId]] = {
    # Cursor movement
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorWordLeft": ["alt+left", "ctrl+left", "alt+b"],
    "cursorWordRight": ["alt+right", "ctrl+right", "alt+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    # Deletion
    "deleteCharBackward": "backspace",
    "deleteCharForward": "delete",
    "deleteWordBackward": ["alt+backspace", "ctrl+w"],
    "deleteToLineStart": "ctrl+u",
    "deleteToLineEnd": "ctrl+k",
    # History
    "historyPrev": ["up", "ctrl+p"],
    "historyNext": ["down", "ctrl+n"],
    # Completion
    "complete": "tab",
    # Line control
    "submit": "enter",
    "interrupt": "ctrl+c",
    "endOfInput": "ctrl+d",
}

ACTION_KINDS: dict[PromptAction, KeyKind] = {
    "cursorLeft": KeyKind.CURSOR_LEFT,
    "cursorRight": KeyKind.CURSOR_RIGHT,
    "cursorWordLeft": KeyKind.CURSOR_WORD_LEFT,
    "cursorWordRight": KeyKind.CURSOR_WORD_RIGHT,
    "cursorLineStart": KeyKind.CURSOR_HOME,
    "cursorLineEnd": KeyKind.CURSOR_END,
    "deleteCharBackward": KeyKind.BACKSPACE,
    "deleteCharForward": KeyKind.DELETE,
    "deleteWordBackward": KeyKind.DELETE_WORD_BACKWARD,
    "deleteToLineStart": KeyKind.DELETE_TO_LINE_START,
    "deleteToLineEnd": KeyKind.DELETE_TO_LINE_END,
    "historyPrev": KeyKind.HISTORY_PREV,
    "historyNext": KeyKind.HISTORY_NEXT,
    "complete": KeyKind.COMPLETE,
    "submit": KeyKind.SUBMIT,
    "interrupt": KeyKind.INTERRUPT,
    "endOfInput": KeyKind.EOF,
}


class PromptKeybindingsManager:
    """Maps key identifiers onto prompt actions.

    User config replaces the default keys of each action it names; actions it
    does not mention keep their defaults. When two actions claim the same
    key, a configured action wins over a default one, and otherwise the
    action listed first in ``DEFAULT_PROMPT_KEYBINDINGS`` wins.
    """

    def __init__(
        self, config: PromptKeybindingsConfig | None = None
    ) -> None:
        self._action_to_keys: dict[PromptAction, list[KeyId]] = {}
        self._key_to_action: dict[KeyId, PromptAction] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: PromptKeybindingsConfig) -> None:
        self._action_to_keys.clear()
        self._key_to_action.clear()

        for action, keys in DEFAULT_PROMPT_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            if action not in ACTION_KINDS:
                raise ValueError(f"Unknown prompt action: {action!r}")
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        # Configured actions claim their keys before the defaults do
        ordered = [a for a in self._action_to_keys if a in config]
        ordered += [a for a in self._action_to_keys if a not in config]
        for action in ordered:
            for key in self._action_to_keys[action]:
                self._key_to_action.setdefault(key.lower(), action)

    def action_for(self, key_id: KeyId) -> PromptAction | None:
        """Return the action bound to *key_id*, if any."""
        return self._key_to_action.get(key_id.lower())

    def kind_for(self, key_id: KeyId) -> KeyKind | None:
        action = self.action_for(key_id)
        return ACTION_KINDS[action] if action else None

    def matches(self, data: str, action: PromptAction) -> bool:
        """Check if raw input matches a specific action."""
        key_id = parse_key(data)
        if key_id is None:
            return False
        return self.action_for(key_id) == action

    def get_keys(self, action: PromptAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def set_config(self, config: PromptKeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)


_global_prompt_keybindings: PromptKeybindingsManager | None = None


def get_prompt_keybindings() -> PromptKeybindingsManager:
    global _global_prompt_keybindings
    if _global_prompt_keybindings is None:
        _global_prompt_keybindings = PromptKeybindingsManager()
    return _global_prompt_keybindings


def set_prompt_keybindings(manager: PromptKeybindingsManager) -> None:
    global _global_prompt_keybindings
    _global_prompt_keybindings = manager
