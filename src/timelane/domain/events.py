"""Input events emitted by a rendering front end.

A front end reports pointer, keyboard, and zoom gestures as these values;
:meth:`timelane.services.session.TimelineSession.dispatch` feeds them to
the interaction engine. They are also the on-disk format of replay
scripts (a JSON list of objects tagged by ``"type"``).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter

from timelane.domain.interaction import Handle


class _Event(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}


class PointerDown(_Event):
    type: Literal["pointer_down"] = "pointer_down"
    item: int
    handle: Handle = Handle.BODY
    x: float = Field(default=0.0, allow_inf_nan=False)


class PointerMove(_Event):
    type: Literal["pointer_move"] = "pointer_move"
    x: float = Field(allow_inf_nan=False)


class PointerUp(_Event):
    type: Literal["pointer_up"] = "pointer_up"


class CancelDrag(_Event):
    type: Literal["cancel"] = "cancel"


class Zoom(_Event):
    type: Literal["zoom"] = "zoom"
    direction: Literal["in", "out"]


class BeginRename(_Event):
    type: Literal["begin_rename"] = "begin_rename"
    item: int


class TextInput(_Event):
    type: Literal["text"] = "text"
    text: str


class KeyPress(_Event):
    type: Literal["key"] = "key"
    key: str


class Blur(_Event):
    type: Literal["blur"] = "blur"


InputEvent = Annotated[
    PointerDown
    | PointerMove
    | PointerUp
    | CancelDrag
    | Zoom
    | BeginRename
    | TextInput
    | KeyPress
    | Blur,
    Field(discriminator="type"),
]

_EVENT_LIST = TypeAdapter(list[InputEvent])


def parse_events(raw: Iterable[Mapping[str, Any]]) -> list[InputEvent]:
    """Validate a list of event objects.

    Raises:
        pydantic.ValidationError: On an unknown ``type`` or bad fields.
    """
    return _EVENT_LIST.validate_python([dict(r) for r in raw])
