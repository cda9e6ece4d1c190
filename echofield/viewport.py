from __future__ import annotations

import logging
import math
from typing import Optional

logger = logging.getLogger(__name__)


class ViewTransform:
    """Pan/zoom applied on top of layout coordinates: ``screen = model * scale + pan``."""

    def __init__(self, min_scale: float = 0.1, max_scale: float = 5.0) -> None:
        if min_scale <= 0 or max_scale < min_scale:
            raise ValueError(f"invalid scale range [{min_scale}, {max_scale}]")
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.scale = 1.0

    def _clamp(self, scale: float) -> float:
        return max(self.min_scale, min(self.max_scale, scale))

    def pan(self, dx: float, dy: float) -> None:
        if not (math.isfinite(dx) and math.isfinite(dy)):
            return
        self.pan_x += dx
        self.pan_y += dy

    def zoom_by(self, factor: float, around: Optional[tuple] = None) -> None:
        """Scale by ``factor``, keeping the model point under ``around`` fixed on screen."""
        if not math.isfinite(factor) or factor <= 0:
            logger.debug("Ignoring zoom factor %r", factor)
            return
        if around is not None and not all(math.isfinite(v) for v in around):
            logger.debug("Ignoring zoom anchor %r", around)
            return
        new_scale = self._clamp(self.scale * factor)
        if around is not None:
            mx, my = self.invert(around)
            self.pan_x = around[0] - mx * new_scale
            self.pan_y = around[1] - my * new_scale
        self.scale = new_scale

    def reset(self) -> None:
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.scale = 1.0

    def apply(self, point: tuple) -> tuple:
        x, y = point
        return (x * self.scale + self.pan_x, y * self.scale + self.pan_y)

    def invert(self, point: tuple) -> tuple:
        x, y = point
        return ((x - self.pan_x) / self.scale, (y - self.pan_y) / self.scale)

    def to_dict(self) -> dict:
        return {"panX": self.pan_x, "panY": self.pan_y, "scale": self.scale}
