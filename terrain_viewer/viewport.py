"""
Viewport capture for the interactive map.

The map itself lives in the browser. MapView is the per-session handle that
mirrors what the browser last reported, so the rest of the app can read the
viewport the same way it would read a map widget.
"""

import logging
from typing import Any, Dict, Optional
from typing_extensions import Protocol

from terrain_viewer.config import APP_CONFIG, MapConfig, RenderMode
from terrain_viewer.models import BoundingBoxRequest
from terrain_viewer.schemas import MapBounds

logger = logging.getLogger(__name__)


class MapNotReadyError(RuntimeError):
    """Raised when the map has not reported a viewport yet, or was released."""


class MapWidget(Protocol):
    def get_bounds(self) -> MapBounds: ...

    def get_zoom(self) -> int: ...


class MapView:
    """
    Server-side handle for one browser map.

    Acquired when a chat starts and released when it ends.
    """

    def __init__(self, config: MapConfig = None):
        self.config = config or APP_CONFIG.map
        self._bounds: Optional[MapBounds] = None
        self._zoom: int = self.config.zoom
        self._released = False

    @property
    def ready(self) -> bool:
        return self._bounds is not None and not self._released

    def element_props(self) -> Dict[str, Any]:
        """Props for the browser map element."""
        return {
            "center": [self.config.center_lat, self.config.center_lon],
            "zoom": self.config.zoom,
            "maxZoom": self.config.max_zoom,
            "tileUrl": self.config.tile_url,
            "attribution": self.config.attribution,
        }

    def update(self, bounds: MapBounds, zoom: int) -> None:
        if self._released:
            raise MapNotReadyError("Map view was released")
        self._bounds = bounds
        self._zoom = zoom

    def update_from_payload(self, payload: Dict[str, Any]) -> None:
        """Store a {north, south, east, west, zoom} report from the browser."""
        self.update(MapBounds.from_payload(payload), int(payload["zoom"]))
        logger.debug(f"Viewport updated: {payload}")

    def get_bounds(self) -> MapBounds:
        if not self.ready:
            raise MapNotReadyError("Map has not reported its viewport yet")
        return self._bounds

    def get_zoom(self) -> int:
        if not self.ready:
            raise MapNotReadyError("Map has not reported its viewport yet")
        return self._zoom

    def release(self) -> None:
        self._bounds = None
        self._released = True


def capture_viewport(widget: MapWidget, render_mode: RenderMode) -> BoundingBoxRequest:
    """Snapshot the widget's visible rectangle and zoom into a request."""
    bounds = widget.get_bounds()
    return BoundingBoxRequest(
        upper_left_longitude=bounds.north_west.lng,
        upper_left_latitude=bounds.north_west.lat,
        lower_right_longitude=bounds.south_east.lng,
        lower_right_latitude=bounds.south_east.lat,
        zoom_level=widget.get_zoom(),
        render_mode=render_mode
    )
