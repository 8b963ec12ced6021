"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Owns the lazy Workspace and centralizes result
emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from timelane.output.formatters import OutputSettings, format_result
from timelane.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from timelane.config.settings import TimelaneSettings
    from timelane.infrastructure.workspace import Workspace


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The workspace is created on first use so ``--help`` and ``--version``
    never open the database.
    """

    def __init__(self, settings: TimelaneSettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None

        from timelane.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )

    @property
    def workspace(self) -> Workspace:
        if self._workspace is None:
            from timelane.infrastructure.workspace import Workspace

            self._workspace = Workspace(self.settings)
        return self._workspace

    def close(self) -> None:
        if self._workspace is not None:
            self._workspace.close()
            self._workspace = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout and returns. Warnings go to stderr
          so they stay out of piped output.
        * Failure: writes to stderr and exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # JSON output already carries warnings in the payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def read_json_list(self, file: str, op: str) -> list[Any]:
        """Load a JSON array from *file*; emits an INVALID_INPUT failure otherwise."""
        payload: Any = None
        error: str | None = None
        try:
            with open(file, encoding="utf-8") as f:
                payload = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            error = f"Error reading {file}: {exc}"
        else:
            if not isinstance(payload, list):
                error = f"Expected a JSON array in {file}, got {type(payload).__name__}"
        if error is not None:
            self.emit(ServiceResult.failure(op, ErrorCode.INVALID_INPUT, error))
        return payload
