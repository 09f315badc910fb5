"""View controller for the bubble chart.

The controller owns the current selection, the pan/zoom transform and the
derived render state. Input arrives as event objects through
:meth:`ViewController.dispatch`, which always returns a :class:`RenderRequest`
describing what the renderer should do next.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

import pandas as pd

from core.filters import ALL_REGIONS, Selection, filter_selection
from core.metrics_summary import compute_summary, tooltip_content
from core.scales import PlotArea, Scales, compute_scales, render_order
from core.transform import IDENTITY, ViewTransform, ZoomSettings


logger = logging.getLogger(__name__)


class Interaction(Enum):
    IDLE = "idle"
    PANNING = "panning"


@dataclass(frozen=True)
class SelectYear:
    year: int


@dataclass(frozen=True)
class SelectRegion:
    region: str


@dataclass(frozen=True)
class ClearRegion:
    pass


@dataclass(frozen=True)
class ZoomIn:
    pass


@dataclass(frozen=True)
class ZoomOut:
    pass


@dataclass(frozen=True)
class ResetZoom:
    pass


@dataclass(frozen=True)
class GestureStart:
    pass


@dataclass(frozen=True)
class GestureMove:
    dx: float = 0.0
    dy: float = 0.0
    factor: float = 1.0
    center: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class GestureEnd:
    pass


@dataclass(frozen=True)
class Hover:
    index: int


@dataclass(frozen=True)
class Leave:
    pass


Event = Union[
    SelectYear, SelectRegion, ClearRegion, ZoomIn, ZoomOut, ResetZoom,
    GestureStart, GestureMove, GestureEnd, Hover, Leave,
]


@dataclass(frozen=True, eq=False)
class RenderRequest:
    """What the renderer should draw.

    ``kind`` is one of ``"full"`` (new data and scales), ``"reproject"``
    (same points and scales, new transform), ``"empty"`` (no data for the
    selection) or ``"tooltip"`` (show/hide the hover tooltip only).
    """

    kind: str
    selection: Selection
    points: pd.DataFrame
    scales: Optional[Scales]
    transform: ViewTransform
    summary: Dict[str, Any]
    area: PlotArea = field(default_factory=PlotArea)
    message: Optional[str] = None
    tooltip: Optional[Dict[str, str]] = None
    transition_ms: int = 0

    @property
    def highlight(self) -> bool:
        return self.selection.is_region_filtered


class ViewController:
    def __init__(
        self,
        dataset: pd.DataFrame,
        selection: Optional[Selection] = None,
        *,
        area: Optional[PlotArea] = None,
        zoom: Optional[ZoomSettings] = None,
    ) -> None:
        self._dataset = dataset
        self.area = area or PlotArea()
        self.zoom = zoom or ZoomSettings()
        self.selection = selection or Selection()
        self.transform = IDENTITY
        self.interaction = Interaction.IDLE
        self.points = dataset.iloc[0:0]
        self.scales: Optional[Scales] = None
        self.summary: Dict[str, Any] = {}
        self.message: Optional[str] = None
        self._last = self._recompute()

    @property
    def dataset(self) -> pd.DataFrame:
        return self._dataset

    @property
    def last_request(self) -> RenderRequest:
        return self._last

    def dispatch(self, event: Event) -> RenderRequest:
        if isinstance(event, SelectYear):
            self.selection = Selection(year=int(event.year), region=self.selection.region)
            request = self._recompute()
        elif isinstance(event, SelectRegion):
            region = (event.region or "").strip() or ALL_REGIONS
            self.selection = Selection(year=self.selection.year, region=region)
            request = self._recompute()
        elif isinstance(event, ClearRegion):
            self.selection = Selection(year=self.selection.year, region=ALL_REGIONS)
            request = self._recompute()
        elif isinstance(event, ZoomIn):
            request = self._zoom(self.zoom.zoom_in_step)
        elif isinstance(event, ZoomOut):
            request = self._zoom(self.zoom.zoom_out_step)
        elif isinstance(event, ResetZoom):
            self.transform = IDENTITY
            self.interaction = Interaction.IDLE
            request = self._reproject(self.zoom.reset_duration_ms)
        elif isinstance(event, GestureStart):
            self.interaction = Interaction.PANNING
            request = self._reproject()
        elif isinstance(event, GestureMove):
            self.interaction = Interaction.PANNING
            transform = self.transform.translate(event.dx, event.dy)
            if event.factor != 1.0:
                transform = transform.scale_by(event.factor, event.center or self.area.center, self.zoom.scale_extent)
            self.transform = transform
            request = self._reproject()
        elif isinstance(event, GestureEnd):
            self.interaction = Interaction.IDLE
            request = self._reproject()
        elif isinstance(event, Hover):
            request = self._tooltip(event.index)
        elif isinstance(event, Leave):
            request = self._tooltip(None)
        else:
            raise TypeError(f"unsupported event: {event!r}")
        self._last = request
        return request

    def _recompute(self) -> RenderRequest:
        sel = self.selection
        filtered = filter_selection(self._dataset, sel)
        self.transform = IDENTITY
        self.interaction = Interaction.IDLE
        self.summary = compute_summary(filtered, sel)
        self.message = None

        if filtered.empty:
            self.points = filtered
            self.scales = None
            logger.warning("No data for year %s and region %s", sel.year, sel.region)
            self.message = f"No data available for {sel.region} in {sel.year}"
            return self._request("empty", message=self.message)

        self.points = render_order(filtered)
        self.scales = compute_scales(filtered, self.area)
        logger.info("Rendered %d countries for %s, region: %s", len(filtered), sel.year, sel.region)
        return self._request("full")

    def _zoom(self, factor: float) -> RenderRequest:
        self.transform = self.transform.scale_by(factor, self.area.center, self.zoom.scale_extent)
        return self._reproject(self.zoom.zoom_duration_ms)

    def _reproject(self, transition_ms: int = 0) -> RenderRequest:
        if self.scales is None:
            return self._request("empty", message=self.message)
        return self._request("reproject", transition_ms=transition_ms)

    def _tooltip(self, index: Optional[int]) -> RenderRequest:
        tooltip = None
        if index is not None and 0 <= index < len(self.points):
            tooltip = tooltip_content(self.points.iloc[index].to_dict())
        return self._request("tooltip", tooltip=tooltip)

    def _request(self, kind: str, **kwargs: Any) -> RenderRequest:
        return RenderRequest(
            kind=kind,
            selection=self.selection,
            points=self.points,
            scales=self.scales,
            transform=self.transform,
            summary=self.summary,
            area=self.area,
            **kwargs,
        )
