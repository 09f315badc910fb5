from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(frozen=True)
class ZoomSettings:
    scale_extent: Tuple[float, float] = (0.5, 10.0)
    zoom_in_step: float = 1.3
    zoom_out_step: float = 0.77
    zoom_duration_ms: int = 500
    reset_duration_ms: int = 750


@dataclass(frozen=True)
class ViewTransform:
    """Pan/zoom transform applied on top of the base pixel scales.

    A point ``(x, y)`` in base pixel space is drawn at
    ``(x * scale + translate_x, y * scale + translate_y)``.
    """

    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0

    @property
    def is_identity(self) -> bool:
        return self.translate_x == 0.0 and self.translate_y == 0.0 and self.scale == 1.0

    def apply_x(self, x: float) -> float:
        return x * self.scale + self.translate_x

    def apply_y(self, y: float) -> float:
        return y * self.scale + self.translate_y

    def invert_x(self, x: float) -> float:
        return (x - self.translate_x) / self.scale

    def invert_y(self, y: float) -> float:
        return (y - self.translate_y) / self.scale

    def translate(self, dx: float, dy: float) -> "ViewTransform":
        return replace(self, translate_x=self.translate_x + dx, translate_y=self.translate_y + dy)

    def scale_by(
        self,
        factor: float,
        center: Tuple[float, float],
        extent: Tuple[float, float] = ZoomSettings().scale_extent,
    ) -> "ViewTransform":
        """Zoom by ``factor`` keeping the pixel at ``center`` fixed on screen."""
        lo, hi = extent
        k = min(hi, max(lo, self.scale * factor))
        cx, cy = center
        # base-space point currently under the centre
        bx, by = self.invert_x(cx), self.invert_y(cy)
        return ViewTransform(translate_x=cx - bx * k, translate_y=cy - by * k, scale=k)

    def rescale_x(self, scale):
        return scale.rescaled([self.invert_x(r) for r in scale.range])

    def rescale_y(self, scale):
        return scale.rescaled([self.invert_y(r) for r in scale.range])


IDENTITY = ViewTransform()
