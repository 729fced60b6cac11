"""Tests for pi.prompt.commands -- command-tree completion provider."""

from __future__ import annotations

from pi.prompt.commands import ArbitraryArgument, Command, CommandCompleter, Flag


def make_completer() -> CommandCompleter:
    return CommandCompleter(
        [
            Command("print"),
            Command("printf"),
            Command("cat").arg("--help").arg("--version"),
            Command("ssh").arg(ArbitraryArgument("host", "remote host")),
            Command("git")
            .subcommand(Command("commit").arg("--amend"))
            .subcommand(Command("push")),
            Command("exit"),
        ]
    )


class TestCommandBuilder:
    """Command.arg and Command.subcommand build the tree."""

    def test_arg_from_string_is_flag(self) -> None:
        cmd = Command("cat").arg("--help")
        assert cmd.args == [Flag("--help")]

    def test_arg_accepts_argument_objects(self) -> None:
        arg = ArbitraryArgument("file", "path to read")
        cmd = Command("cat").arg(arg)
        assert cmd.args == [arg]

    def test_subcommand_chains(self) -> None:
        cmd = Command("git").subcommand(Command("push")).subcommand(Command("pull"))
        assert [c.name for c in cmd.subcommands] == ["push", "pull"]


class TestCommandCompleterCall:
    """Calling the completer with a prefix completes command names."""

    def test_prefix_filters_names(self) -> None:
        assert make_completer()("pr") == ["print", "printf"]

    def test_empty_prefix_lists_all(self) -> None:
        assert make_completer()("") == ["print", "printf", "cat", "ssh", "git", "exit"]

    def test_unknown_prefix(self) -> None:
        assert make_completer()("zz") == []


class TestCommandCompleterContext:
    """complete_with_context completes flags and subcommands of the active command."""

    def test_no_words_offers_commands(self) -> None:
        assert make_completer().complete_with_context("e", []) == ["exit"]

    def test_flags_of_active_command(self) -> None:
        assert make_completer().complete_with_context("--h", ["cat"]) == ["--help"]

    def test_all_flags_for_empty_prefix(self) -> None:
        assert make_completer().complete_with_context("", ["cat"]) == ["--help", "--version"]

    def test_subcommands(self) -> None:
        assert make_completer().complete_with_context("", ["git"]) == ["commit", "push"]

    def test_nested_subcommand_flags(self) -> None:
        completer = make_completer()
        assert completer.complete_with_context("--a", ["git", "commit"]) == ["--amend"]

    def test_unknown_command_offers_nothing(self) -> None:
        assert make_completer().complete_with_context("", ["unknown"]) == []

    def test_arbitrary_argument_offers_nothing(self) -> None:
        assert make_completer().complete_with_context("", ["ssh"]) == []


class TestCommandCompleterDescribe:
    """describe() explains free-text arguments."""

    def test_describes_arbitrary_argument(self) -> None:
        assert make_completer().describe(["ssh"]) == "host: remote host"

    def test_argument_without_description(self) -> None:
        completer = CommandCompleter([Command("open").arg(ArbitraryArgument("url"))])
        assert completer.describe(["open"]) == "url"

    def test_no_description_for_flags(self) -> None:
        assert make_completer().describe(["cat"]) is None

    def test_no_description_without_command(self) -> None:
        assert make_completer().describe([]) is None
