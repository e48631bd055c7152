from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Tuple

from ..filters import FilterExpr, evaluate_filter

LOGGER = logging.getLogger(__name__)

LonLat = Tuple[float, float]
Bounds = Tuple[LonLat, LonLat]


@dataclass
class Camera:
    center: LonLat = (0.0, 20.0)
    zoom: float = 1.4


class MapState:
    """In-memory rendering surface.

    Records everything the view layer asks of a vector-tile map: layer
    visibility, layer filters, navigable bounds, zoom range, camera and the
    point feature collection. Camera moves complete when :meth:`settle` runs,
    which fires the completion callback of the latest move; starting a move
    interrupts the previous one and drops its callback.
    """

    def __init__(self, layers: List[str]):
        self.visibility: Dict[str, bool] = {layer: True for layer in layers}
        self.filters: Dict[str, FilterExpr] = {}
        self.max_bounds: Optional[Bounds] = None
        self.zoom_range: Tuple[float, float] = (0.0, 22.0)
        self.camera = Camera()
        self.camera_moves: List[Camera] = []
        self.points: Dict[str, Any] = {"type": "FeatureCollection", "features": []}
        self._pending: Deque[Optional[Callable[[], None]]] = deque()

    def set_visibility(self, layer: str, visible: bool) -> None:
        if layer not in self.visibility:
            LOGGER.debug("Ignoring visibility for unknown layer %s", layer)
            return
        self.visibility[layer] = visible

    def visible_layers(self) -> List[str]:
        return [layer for layer, visible in self.visibility.items() if visible]

    def set_filter(self, layer: str, expr: FilterExpr) -> None:
        self.filters[layer] = expr

    def set_max_bounds(self, bounds: Optional[Bounds]) -> None:
        self.max_bounds = bounds

    def set_zoom_range(self, min_zoom: float, max_zoom: float) -> None:
        self.zoom_range = (min_zoom, max_zoom)

    def set_points(self, collection: Dict[str, Any]) -> None:
        self.points = collection

    def ease_to(
        self,
        center: LonLat,
        zoom: float,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> None:
        min_zoom, max_zoom = self.zoom_range
        self.camera = Camera(center=center, zoom=min(max(zoom, min_zoom), max_zoom))
        self.camera_moves.append(self.camera)
        # A new move interrupts any in-flight one; its completion never fires.
        self._pending.clear()
        self._pending.append(on_complete)

    @property
    def animating(self) -> bool:
        return bool(self._pending)

    def settle(self) -> None:
        """Finish in-flight camera animations, including ones their callbacks start."""
        while self._pending:
            callback = self._pending.popleft()
            if callback is not None:
                callback()

    def matching(self, layer: str, features: List[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
        """Features a layer would draw under its current filter."""
        expr = self.filters.get(layer)
        if expr is None:
            return list(features)
        return [
            feature
            for feature in features
            if evaluate_filter(expr, feature.get("properties") or {})
        ]

    def to_json(self) -> Dict[str, Any]:
        return {
            "visibility": dict(self.visibility),
            "filters": dict(self.filters),
            "maxBounds": [list(corner) for corner in self.max_bounds]
            if self.max_bounds
            else None,
            "zoomRange": list(self.zoom_range),
            "camera": {"center": list(self.camera.center), "zoom": self.camera.zoom},
            "points": self.points,
        }
