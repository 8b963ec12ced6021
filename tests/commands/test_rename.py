"""Tests for the rename command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from timelane.cli import cli


@pytest.mark.usefixtures("_seeded_cwd")
class TestRenameCommand:
    def test_rename(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "rename", "2", "Design review"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["data"]["after"] == "Design review"

        items = json.loads(cli_runner.invoke(cli, ["--json", "items"]).output)["data"]["items"]
        assert items[1]["name"] == "Design review"

    def test_empty_name(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "rename", "1", ""])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["after"] == ""

    def test_unknown_item(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["rename", "77", "x"])
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.output
