"""Shared pytest fixtures and test helpers for timelane tests."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from timelane.config.settings import TimelaneSettings
from timelane.infrastructure.store import TimelineStore
from timelane.infrastructure.workspace import Workspace

# Three items from the canonical packing example: 1 and 3 share a lane, 2 overlaps both.
SAMPLE_RECORDS: list[dict[str, Any]] = [
    {"id": 1, "name": "Kickoff", "start": "2024-01-01", "end": "2024-01-10"},
    {"id": 2, "name": "Design", "start": "2024-01-05", "end": "2024-01-15"},
    {"id": 3, "name": "Build", "start": "2024-01-11", "end": "2024-01-20"},
]


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo handler changes made by configure_logging (the CLI calls it)."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    tl = logging.getLogger("timelane")
    tl_level = tl.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    tl.setLevel(tl_level)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TIMELANE_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("TIMELANE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    return [dict(r) for r in SAMPLE_RECORDS]


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Empty workspace directory (no database yet)."""
    return tmp_path


@pytest.fixture
def settings(workspace_root: Path) -> TimelaneSettings:
    return TimelaneSettings.from_cli(root=workspace_root)


@pytest.fixture
def workspace(settings: TimelaneSettings) -> Generator[Workspace]:
    """Workspace over the temp root; the database is created on first store access."""
    ws = Workspace(settings)
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def store(workspace_root: Path) -> Generator[TimelineStore]:
    s = TimelineStore.open(workspace_root)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def seeded_workspace(workspace: Workspace, sample_records: list[dict[str, Any]]) -> Workspace:
    """Initialized workspace holding SAMPLE_RECORDS."""
    workspace.store.add_items(sample_records)
    return workspace


@pytest.fixture
def _isolated_workspace(workspace_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp workspace so the CLI operates on it.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    monkeypatch.chdir(workspace_root)


@pytest.fixture
def _seeded_cwd(_isolated_workspace: None, cli_runner: CliRunner, tmp_path: Path) -> None:
    """CWD workspace initialized through the CLI with SAMPLE_RECORDS."""
    import json

    from timelane.cli import cli

    seed = tmp_path / "seed.json"
    seed.write_text(json.dumps(SAMPLE_RECORDS), encoding="utf-8")
    result = cli_runner.invoke(cli, ["init", "--seed", str(seed)])
    assert result.exit_code == 0, result.output


# ---------------------------------------------------------------------------
# In-memory backend for reconciliation tests
# ---------------------------------------------------------------------------


class FakeBackend:
    """Async in-memory TimelineBackend with failure and ordering controls.

    ``gates`` holds one ``asyncio.Event`` per call number (1-based, counting
    update calls only); a gated call waits for its event before answering,
    which lets tests force responses to arrive out of issue order.
    ``fail_on`` lists update call numbers that raise instead of answering.
    """

    def __init__(self, records: list[dict[str, Any]]) -> None:
        self.records: dict[int, dict[str, Any]] = {r["id"]: dict(r) for r in records}
        self.calls: list[tuple[str, Any]] = []
        self.gates: dict[int, asyncio.Event] = {}
        self.fail_on: set[int] = set()

    def _snapshot(self) -> list[dict[str, Any]]:
        return [dict(self.records[k]) for k in sorted(self.records)]

    async def _answer(self, call: tuple[str, Any]) -> int:
        self.calls.append(call)
        number = len(self.calls)
        gate = self.gates.get(number)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)
        if number in self.fail_on:
            raise ConnectionError(f"backend unavailable (call {number})")
        return number

    async def fetch_all(self) -> list[dict[str, Any]]:
        return self._snapshot()

    async def update_dates(self, item_id: int, start: str, end: str) -> list[dict[str, Any]]:
        await self._answer(("dates", (item_id, start, end)))
        if item_id in self.records:
            self.records[item_id].update(start=start, end=end)
        return self._snapshot()

    async def update_name(self, item_id: int, name: str) -> list[dict[str, Any]]:
        await self._answer(("name", (item_id, name)))
        if item_id in self.records:
            self.records[item_id]["name"] = name
        return self._snapshot()


@pytest.fixture
def fake_backend(sample_records: list[dict[str, Any]]) -> FakeBackend:
    return FakeBackend(sample_records)
