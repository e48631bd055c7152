from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .filters import compile_point_filter, compile_region_filter, point_features
from .renderer.surface import Bounds, LonLat, MapState
from .resolver import resolve
from .schemas import Scope, VisitRecord

LOGGER = logging.getLogger(__name__)

POINTS_LAYER = "trip-points-layer"
FOCUS_ZOOM = 4.0

LAYER_PREFIX = {Scope.WORLD: "countries", Scope.CN: "cn", Scope.US: "us"}


def base_layers(scope: Scope) -> List[str]:
    prefix = LAYER_PREFIX[scope]
    return [f"{prefix}-base-fill", f"{prefix}-base-line"]


def highlight_layers(scope: Scope) -> List[str]:
    prefix = LAYER_PREFIX[scope]
    return [f"{prefix}-hi", f"{prefix}-hi-line"]


def scope_layers(scope: Scope) -> List[str]:
    return base_layers(scope) + highlight_layers(scope)


ALL_LAYERS: List[str] = [layer for scope in Scope for layer in scope_layers(scope)]


@dataclass(frozen=True)
class CameraPreset:
    center: LonLat
    zoom: float
    zoom_range: Tuple[float, float]
    max_bounds: Optional[Bounds] = None


CAMERA_PRESETS: Dict[Scope, CameraPreset] = {
    Scope.WORLD: CameraPreset(center=(0.0, 20.0), zoom=1.5, zoom_range=(1.0, 5.0)),
    Scope.CN: CameraPreset(
        center=(104.0, 28.0),
        zoom=2.0,
        zoom_range=(2.0, 6.0),
        max_bounds=((60.0, -10.0), (160.0, 60.0)),
    ),
    Scope.US: CameraPreset(
        center=(-98.0, 38.0),
        zoom=3.0,
        zoom_range=(2.0, 7.0),
        max_bounds=((-180.0, 10.0), (-50.0, 75.0)),
    ),
}


@dataclass(frozen=True)
class ViewContext:
    """The (records, tag, scope) triple every derived map state is computed from."""

    records: Tuple[VisitRecord, ...]
    tag: str
    scope: Scope = Scope.WORLD

    @classmethod
    def of(cls, records: Sequence[VisitRecord], tag: str, scope: Scope) -> "ViewContext":
        return cls(records=tuple(records), tag=tag, scope=scope)


class ViewController:
    """Drives a rendering surface through World/CN/US scope transitions."""

    def __init__(self, surface: MapState):
        self.surface = surface
        self.scope: Optional[Scope] = None

    def enter(
        self,
        context: ViewContext,
        on_arrival: Optional[Callable[[], None]] = None,
    ) -> None:
        scope = context.scope
        preset = CAMERA_PRESETS[scope]
        for layer in ALL_LAYERS:
            self.surface.set_visibility(layer, False)
        for layer in scope_layers(scope):
            self.surface.set_visibility(layer, True)
        self.surface.set_max_bounds(preset.max_bounds)
        self.surface.set_zoom_range(*preset.zoom_range)
        self.scope = scope
        self.refresh(context)
        LOGGER.debug("Entered %s scope", scope.value)
        self.surface.ease_to(preset.center, preset.zoom, on_complete=on_arrival)

    def refresh(self, context: ViewContext) -> None:
        """Recompute highlight and point filters for the current triple."""
        keys = resolve(context.records, context.tag, context.scope)
        region_filter = compile_region_filter(keys, context.scope)
        for layer in highlight_layers(context.scope):
            self.surface.set_filter(layer, region_filter)
        self.surface.set_points(point_features(context.records))
        self.surface.set_filter(POINTS_LAYER, compile_point_filter(context.tag, context.scope))
        LOGGER.debug(
            "Highlighting %d region keys for tag %s in %s",
            len(keys),
            context.tag,
            context.scope.value,
        )

    def fly_to(self, record: VisitRecord, zoom: float = FOCUS_ZOOM) -> None:
        self.surface.ease_to((record.place.lon, record.place.lat), zoom)

    def focus_new_visit(self, context: ViewContext, record: VisitRecord) -> Scope:
        """Switch to the visit's scope, then zoom in on it once the switch lands."""
        scope = Scope.for_country(record.place.country_iso2)
        target = ViewContext(records=context.records, tag=context.tag, scope=scope)
        self.enter(target, on_arrival=lambda: self.fly_to(record))
        return scope
