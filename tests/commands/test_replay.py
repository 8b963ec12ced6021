"""Tests for the replay command."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from timelane.cli import cli


def _script(tmp_path: Path, events: list[dict[str, Any]]) -> str:
    path = tmp_path / "script.json"
    path.write_text(json.dumps(events))
    return str(path)


@pytest.mark.usefixtures("_seeded_cwd")
class TestReplayCommand:
    def test_replay(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = _script(
            tmp_path,
            [
                {"type": "pointer_down", "item": 2, "handle": "end", "x": 0},
                {"type": "pointer_move", "x": -120},
                {"type": "pointer_up"},
                {"type": "begin_rename", "item": 2},
                {"type": "text", "text": "Design (short)"},
                {"type": "key", "key": "Enter"},
            ],
        )
        result = cli_runner.invoke(cli, ["--json", "replay", script])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert data["commits"] == 2
        item = next(i for i in data["items"] if i["id"] == 2)
        assert item == {
            "id": 2,
            "name": "Design (short)",
            "start": "2024-01-05",
            "end": "2024-01-10",
        }

    def test_zoom_option(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = _script(tmp_path, [{"type": "zoom", "direction": "out"}])
        result = cli_runner.invoke(cli, ["--json", "replay", script, "--zoom", "0.5"])
        assert json.loads(result.output)["data"]["zoom"] == 0.5

    def test_invalid_event(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = _script(tmp_path, [{"type": "wiggle"}])
        result = cli_runner.invoke(cli, ["replay", script])
        assert result.exit_code == 1
        assert "Invalid event script" in result.output

    def test_non_finite_position(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "script.json"
        path.write_text('[{"type": "pointer_down", "item": 1}, {"type": "pointer_move", "x": NaN}]')
        result = cli_runner.invoke(cli, ["replay", str(path)])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Invalid event script" in result.output

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["replay", str(tmp_path / "nope.json")])
        assert result.exit_code == 2
