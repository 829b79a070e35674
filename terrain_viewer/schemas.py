from typing import Any, Dict
from pydantic import BaseModel, Field


class LatLng(BaseModel):
    """A geographic point as reported by the map widget."""
    lat: float = Field(
        description="Latitude (-90 to 90)",
        ge=-90.0,
        le=90.0
    )
    # Leaflet reports wrapped longitudes once the map is panned past the antimeridian
    lng: float = Field(description="Longitude")


class MapBounds(BaseModel):
    """Visible rectangle of the map, as two opposite corners."""
    north_west: LatLng
    south_east: LatLng

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "MapBounds":
        """Build bounds from the browser's {north, south, east, west} payload."""
        return cls(
            north_west=LatLng(lat=payload["north"], lng=payload["west"]),
            south_east=LatLng(lat=payload["south"], lng=payload["east"])
        )
