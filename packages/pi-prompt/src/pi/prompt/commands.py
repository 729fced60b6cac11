"""Command-tree completion provider.

Describes the commands a host supports, with their flags, free-text
arguments and subcommands, and completes against that tree::

    completer = CommandCompleter([
        Command("print"),
        Command("cat").arg("--help"),
        Command("exit"),
    ])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Union


@dataclass
class ArbitraryArgument:
    """A free-text argument, described to the user but never completed."""

    name: str
    description: str = ""


@dataclass
class Flag:
    """A fixed argument such as ``--help``."""

    name: str
    arguments: list[ArbitraryArgument] = field(default_factory=list)


Argument = Union[Flag, ArbitraryArgument]


@dataclass
class Command:
    """A (sub)command offered by tab completion."""

    name: str
    args: list[Argument] = field(default_factory=list)
    subcommands: list[Command] = field(default_factory=list)

    def arg(self, arg: Argument | str) -> Command:
        """Add a flag (given by name) or argument; returns ``self`` for chaining."""
        self.args.append(Flag(arg) if isinstance(arg, str) else arg)
        return self

    def subcommand(self, cmd: Command) -> Command:
        self.subcommands.append(cmd)
        return self


def _active_command(words: Sequence[str], commands: Sequence[Command]) -> Command | None:
    """Return the last command named in *words*, searching the whole tree level by level."""
    result: Command | None = None
    level = list(commands)
    for word in words:
        for command in level:
            if command.name == word:
                result = command
                level = list(command.subcommands) or list(commands)
                break
    return result


class CommandCompleter:
    """Completion provider backed by a list of ``Command`` trees.

    Called with just a prefix it completes top-level command names. The
    editor prefers ``complete_with_context``, which also sees the words
    typed before the prefix.
    """

    def __init__(self, commands: Sequence[Command]) -> None:
        self.commands = list(commands)

    def command_names(self) -> list[str]:
        return [cmd.name for cmd in self.commands]

    def __call__(self, prefix: str) -> list[str]:
        return [name for name in self.command_names() if name.startswith(prefix)]

    def complete_with_context(self, prefix: str, words: Sequence[str]) -> list[str]:
        """Complete *prefix* given the already-typed *words* before it."""
        active = _active_command(words, self.commands)
        if active is not None:
            if any(isinstance(a, ArbitraryArgument) for a in active.args):
                return []
            possibilities = [a.name for a in active.args]
            possibilities += [c.name for c in active.subcommands]
        elif not words:
            possibilities = self.command_names()
        else:
            possibilities = []
        return [p for p in possibilities if p.startswith(prefix)]

    def describe(self, words: Sequence[str]) -> str | None:
        """Describe the free-text argument the active command expects, if any."""
        active = _active_command(words, self.commands)
        if active is None:
            return None
        for arg in active.args:
            if isinstance(arg, ArbitraryArgument):
                return f"{arg.name}: {arg.description}" if arg.description else arg.name
        return None
