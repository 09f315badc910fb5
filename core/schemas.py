from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, TypeAdapter

from core.controller import (
    ClearRegion,
    Event,
    GestureEnd,
    GestureMove,
    GestureStart,
    Hover,
    Leave,
    ResetZoom,
    SelectRegion,
    SelectYear,
    ZoomIn,
    ZoomOut,
)


class YearInput(BaseModel):
    type: Literal["year"]
    year: int

    def to_event(self) -> Event:
        return SelectYear(year=self.year)


class RegionInput(BaseModel):
    type: Literal["region"]
    region: str = "all"

    def to_event(self) -> Event:
        return SelectRegion(region=self.region)


class ClearRegionInput(BaseModel):
    type: Literal["clear_region"]

    def to_event(self) -> Event:
        return ClearRegion()


class ZoomInput(BaseModel):
    type: Literal["zoom"]
    direction: Literal["in", "out", "reset"]

    def to_event(self) -> Event:
        return {"in": ZoomIn, "out": ZoomOut, "reset": ResetZoom}[self.direction]()


class GestureInput(BaseModel):
    type: Literal["gesture"]
    phase: Literal["start", "move", "end"]
    dx: float = 0.0
    dy: float = 0.0
    factor: float = Field(default=1.0, gt=0)
    center: Optional[Tuple[float, float]] = None

    def to_event(self) -> Event:
        if self.phase == "start":
            return GestureStart()
        if self.phase == "end":
            return GestureEnd()
        return GestureMove(dx=self.dx, dy=self.dy, factor=self.factor, center=self.center)


class PointerInput(BaseModel):
    type: Literal["pointer"]
    action: Literal["enter", "move", "leave"]
    index: Optional[int] = Field(default=None, ge=0)

    def to_event(self) -> Event:
        if self.action == "leave" or self.index is None:
            return Leave()
        return Hover(index=self.index)


ControlInput = Annotated[
    Union[YearInput, RegionInput, ClearRegionInput, ZoomInput, GestureInput, PointerInput],
    Field(discriminator="type"),
]

_control_adapter: TypeAdapter[Any] = TypeAdapter(ControlInput)


def parse_control(raw: Dict[str, Any]) -> Event:
    """Validate a raw control payload and turn it into a controller event.

    Raises ``pydantic.ValidationError`` for unknown types or bad values.
    """
    return _control_adapter.validate_python(raw).to_event()
