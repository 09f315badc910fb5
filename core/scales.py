"""Visual encodings for the GDP / life-expectancy bubble chart.

Everything here is a pure function of a filtered frame: scales are rebuilt
for every selection and never cached between renders.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
from matplotlib.colors import LinearSegmentedColormap, to_hex

from core.transform import IDENTITY, ViewTransform


RADIUS_RANGE: Tuple[float, float] = (2.0, 30.0)
SCORE_RAMP: List[str] = ["#d73027", "#fee08b", "#1a9850"]
MISSING_COLOR = "#bdbdbd"

_E10, _E5, _E2 = math.sqrt(50), math.sqrt(10), math.sqrt(2)


@dataclass(frozen=True)
class PlotArea:
    width: int = 1000
    height: int = 600
    margin_top: int = 10
    margin_right: int = 10
    margin_bottom: int = 30
    margin_left: int = 20

    @property
    def left(self) -> float:
        return float(self.margin_left)

    @property
    def right(self) -> float:
        return float(self.width - self.margin_right)

    @property
    def top(self) -> float:
        return float(self.margin_top)

    @property
    def bottom(self) -> float:
        return float(self.height - self.margin_bottom)

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)


def _is_degenerate(lo: float, hi: float) -> bool:
    return not (math.isfinite(lo) and math.isfinite(hi)) or lo == hi


def extent(values: pd.Series | Sequence[float]) -> Tuple[float, float]:
    """Min and max of the finite values; ``(nan, nan)`` when there are none."""
    arr = np.asarray(values, dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return (math.nan, math.nan)
    return (float(arr.min()), float(arr.max()))


def tick_increment(start: float, stop: float, count: int = 10) -> float:
    """Round tick step for ``count`` ticks over ``start < stop``.

    Positive results are the step itself; negative results ``-n`` mean a step
    of ``1 / n`` (keeps sub-unit steps exact).
    """
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    if power >= 0:
        return factor * 10 ** power
    return -(10 ** -power) / factor


def nice_domain(lo: float, hi: float, count: int = 10) -> Tuple[float, float]:
    """Expand ``[lo, hi]`` outward to round tick boundaries."""
    if _is_degenerate(lo, hi):
        return (lo, hi)
    reverse = hi < lo
    start, stop = (hi, lo) if reverse else (lo, hi)
    prestep = None
    for _ in range(10):
        step = tick_increment(start, stop, count)
        if step == prestep:
            return (stop, start) if reverse else (start, stop)
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step
    return (lo, hi)


@dataclass(frozen=True)
class LinearScale:
    domain: Tuple[float, float]
    range: Tuple[float, float]

    @property
    def degenerate(self) -> bool:
        return _is_degenerate(*self.domain)

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if self.degenerate:
            return (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if self.degenerate or r0 == r1:
            return d0
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)

    def rescaled(self, pixels: Sequence[float]) -> "LinearScale":
        """Same range, domain re-read at ``pixels`` (used for zoomed axes)."""
        return LinearScale(domain=(self.invert(pixels[0]), self.invert(pixels[1])), range=self.range)


def _signed_sqrt(x: float) -> float:
    return math.copysign(math.sqrt(abs(x)), x)


@dataclass(frozen=True)
class SqrtScale:
    """Square-root scale: output offsets grow with the square root of input,
    so circle area tracks the encoded quantity."""

    domain: Tuple[float, float]
    range: Tuple[float, float] = RADIUS_RANGE

    @property
    def degenerate(self) -> bool:
        return _is_degenerate(*self.domain)

    def __call__(self, value: float) -> float:
        r0, r1 = self.range
        if value is None or not math.isfinite(value):
            return r0
        if self.degenerate:
            return (r0 + r1) / 2
        s0, s1 = (_signed_sqrt(d) for d in self.domain)
        return r0 + (_signed_sqrt(value) - s0) / (s1 - s0) * (r1 - r0)


@lru_cache(maxsize=8)
def _ramp_cmap(ramp: Tuple[str, ...]) -> LinearSegmentedColormap:
    # odd N puts the middle stop exactly on t=0.5
    return LinearSegmentedColormap.from_list("score_ramp", list(ramp), N=257)


@dataclass(frozen=True)
class SequentialColorScale:
    domain: Tuple[float, float]
    ramp: Tuple[str, ...] = tuple(SCORE_RAMP)
    missing: str = MISSING_COLOR

    @property
    def degenerate(self) -> bool:
        return _is_degenerate(*self.domain)

    def interpolate(self, t: float) -> str:
        t = min(1.0, max(0.0, t))
        return to_hex(_ramp_cmap(tuple(self.ramp))(t))

    def __call__(self, value: float) -> str:
        if value is None or not math.isfinite(value):
            return self.missing
        if self.degenerate:
            return self.interpolate(0.5)
        d0, d1 = self.domain
        return self.interpolate((value - d0) / (d1 - d0))


@dataclass(frozen=True)
class Scales:
    x: LinearScale
    y: LinearScale
    radius: SqrtScale
    color: SequentialColorScale


def compute_scales(
    filtered: pd.DataFrame,
    area: PlotArea = PlotArea(),
    radius_range: Tuple[float, float] = RADIUS_RANGE,
) -> Scales:
    """Build the four encodings from a non-empty filtered frame.

    Domains come from this frame only (not the full dataset); x and y are
    niced, radius and colour use the raw extent.
    """
    if filtered.empty:
        raise ValueError("cannot build scales for an empty selection")
    return Scales(
        x=LinearScale(domain=nice_domain(*extent(filtered["log_gdp_per_capita"])), range=(area.left, area.right)),
        y=LinearScale(domain=nice_domain(*extent(filtered["life_expectancy"])), range=(area.bottom, area.top)),
        radius=SqrtScale(domain=extent(filtered["total_population"]), range=radius_range),
        color=SequentialColorScale(domain=extent(filtered["aggregate_score"])),
    )


def render_order(filtered: pd.DataFrame) -> pd.DataFrame:
    """Largest populations first so smaller bubbles are drawn on top."""
    return filtered.sort_values("total_population", ascending=False, kind="mergesort", na_position="last")


def project_points(points: pd.DataFrame, scales: Scales, transform: ViewTransform = IDENTITY) -> pd.DataFrame:
    out = points.copy()
    out["cx"] = [transform.apply_x(scales.x(v)) for v in out["log_gdp_per_capita"]]
    out["cy"] = [transform.apply_y(scales.y(v)) for v in out["life_expectancy"]]
    out["r"] = [scales.radius(v) for v in out["total_population"]]
    out["fill"] = [scales.color(v) for v in out["aggregate_score"]]
    out["draw_index"] = range(len(out))
    return out
