"""Tests for help, version and --examples across the CLI."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from timelane import __version__
from timelane.cli import cli
from timelane.commands._base import EXAMPLES_HINT

COMMANDS = ["init", "seed", "items", "lanes", "drag", "rename", "replay"]


class TestRootHelp:
    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in COMMANDS:
            assert name in result.output

    def test_no_subcommand_prints_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert __version__ in result.output


class TestCommandHelp:
    @pytest.mark.parametrize("name", COMMANDS)
    def test_help(self, cli_runner: CliRunner, name: str) -> None:
        result = cli_runner.invoke(cli, [name, "--help"])
        assert result.exit_code == 0
        assert "--examples" in result.output

    @pytest.mark.parametrize("name", COMMANDS)
    def test_examples(self, cli_runner: CliRunner, name: str) -> None:
        result = cli_runner.invoke(cli, [name, "--examples"])
        assert result.exit_code == 0
        assert f"Examples for 'cli {name}'" in result.output
        assert f"timelane {name}" in result.output or name in result.output


class TestRootGroup:
    def test_commands_listed_in_workflow_order(self, cli_runner: CliRunner) -> None:
        output = cli_runner.invoke(cli, ["--help"]).output
        listing = output[output.index("Commands:") :]
        positions = [listing.index(f"  {name} ") for name in COMMANDS]
        assert positions == sorted(positions)

    def test_root_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--examples"])
        assert result.exit_code == 0
        assert "Examples for 'cli'" in result.output
        assert "timelane --root" in result.output

    def test_help_points_to_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["lanes", "--help"])
        assert EXAMPLES_HINT in result.output
