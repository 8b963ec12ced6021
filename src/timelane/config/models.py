"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, timelane.toml only contains
overrides. A fresh workspace needs no config file at all.
"""

from __future__ import annotations

from typing import Literal, Self

from pydantic import BaseModel, Field, model_validator

from timelane.domain.geometry import (
    DAY_WIDTH_PX,
    MIN_ITEM_WIDTH_PX,
    WINDOW_PADDING_DAYS,
    ZOOM_MAX,
    ZOOM_MIN,
    ZOOM_STEP,
    ZoomLevel,
)


class WorkspaceConfig(BaseModel):
    """[workspace] section."""

    model_config = {"frozen": True}

    name: str = "my-timeline"


class TimelineConfig(BaseModel):
    """[timeline] section."""

    model_config = {"frozen": True}

    day_width_px: float = Field(default=DAY_WIDTH_PX, gt=0)
    min_item_width_px: float = Field(default=MIN_ITEM_WIDTH_PX, ge=0)
    padding_days: int = Field(default=WINDOW_PADDING_DAYS, ge=0)


class ZoomConfig(BaseModel):
    """[zoom] section."""

    model_config = {"frozen": True}

    initial: float = 1.0
    minimum: float = Field(default=ZOOM_MIN, gt=0)
    maximum: float = Field(default=ZOOM_MAX, gt=0)
    step: float = Field(default=ZOOM_STEP, gt=1)

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.minimum > self.maximum:
            msg = f"zoom.minimum ({self.minimum}) exceeds zoom.maximum ({self.maximum})"
            raise ValueError(msg)
        return self

    def level(self, value: float | None = None) -> ZoomLevel:
        """Build a clamped ZoomLevel at *value* (default: ``initial``)."""
        return ZoomLevel(
            self.initial if value is None else value,
            minimum=self.minimum,
            maximum=self.maximum,
            step=self.step,
        )


class ReconcileConfig(BaseModel):
    """[reconcile] section.

    ``policy="replace"`` swaps in the whole collection returned by the
    store (last response wins). ``policy="merge"`` only takes the edited
    item from the response, leaving other local edits in place.
    """

    model_config = {"frozen": True}

    policy: Literal["replace", "merge"] = "replace"
    rollback_on_failure: bool = True
