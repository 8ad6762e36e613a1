# registry/maps/base.py
"""
Provider-independent map contract: center/zoom/markers in, click coordinates out.
"""
import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from django.conf import settings

WORLD_DEGREES = 360.0
MIN_ZOOM = 1


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    @classmethod
    def of(cls, lat, lng):
        return cls(lat=float(lat), lng=float(lng))

    @property
    def in_range(self):
        return -90 <= self.lat <= 90 and -180 <= self.lng <= 180

    def display(self, places=4):
        return f"{self.lat:.{places}f}, {self.lng:.{places}f}"


@dataclass(frozen=True)
class MapMarker:
    id: str
    position: LatLng
    title: str
    # Where the marker leads when clicked; empty means no click action
    url: str = ""

    def as_json(self):
        return {
            'id': self.id,
            'lat': self.position.lat,
            'lng': self.position.lng,
            'title': self.title,
            'url': self.url,
            'label': self.position.display(),
        }


@dataclass(frozen=True)
class Bounds:
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def around(cls, positions):
        lats = [p.lat for p in positions]
        lngs = [p.lng for p in positions]
        return cls(south=min(lats), west=min(lngs), north=max(lats), east=max(lngs))

    @property
    def center(self):
        return LatLng((self.south + self.north) / 2, (self.west + self.east) / 2)

    @property
    def span(self):
        return max(self.north - self.south, self.east - self.west)

    def contains(self, position):
        return self.south <= position.lat <= self.north and self.west <= position.lng <= self.east

    def padded(self, degrees):
        return Bounds(
            south=self.south - degrees,
            west=self.west - degrees,
            north=self.north + degrees,
            east=self.east + degrees,
        )

    def as_lng_lat_pairs(self):
        """[[west, south], [east, north]], the order vector-tile libraries expect."""
        return [[self.west, self.south], [self.east, self.north]]


@dataclass(frozen=True)
class Viewport:
    center: LatLng
    zoom: int
    # Set when the viewport was framed around markers
    bounds: Optional[Bounds] = None

    @property
    def is_framed(self):
        return self.bounds is not None


def zoom_for_bounds(bounds, max_zoom):
    if bounds.span <= 0:
        return max_zoom
    zoom = int(math.floor(math.log2(WORLD_DEGREES / bounds.span)))
    return max(MIN_ZOOM, min(zoom, max_zoom))


def frame_markers(center, zoom, markers, max_zoom=None):
    """
    Work out what the map should show.

    With no markers the supplied center and zoom are used unchanged. With one
    or more markers the viewport frames every marker and the supplied
    center/zoom are ignored.
    """
    if max_zoom is None:
        max_zoom = settings.MAP_MAX_FIT_ZOOM
    if not markers:
        return Viewport(center=center, zoom=zoom)

    bounds = Bounds.around([m.position for m in markers])
    return Viewport(center=bounds.center, zoom=zoom_for_bounds(bounds, max_zoom), bounds=bounds)


def default_center():
    lat, lng = settings.MAP_DEFAULT_CENTER
    return LatLng(lat, lng)


@dataclass
class MapView:
    center: LatLng = field(default_factory=default_center)
    zoom: int = field(default_factory=lambda: settings.MAP_DEFAULT_ZOOM)
    markers: Tuple[MapMarker, ...] = ()
    # Report clicked coordinates into the form fields named below
    click_enabled: bool = False
    latitude_field: str = "id_latitude"
    longitude_field: str = "id_longitude"
    height: str = "600px"
    element_id: str = "registry-map"
    # Closest zoom used when framing markers; None means MAP_MAX_FIT_ZOOM
    max_zoom: Optional[int] = None

    def fit_zoom_limit(self):
        return self.max_zoom if self.max_zoom is not None else settings.MAP_MAX_FIT_ZOOM

    def viewport(self):
        return frame_markers(self.center, self.zoom, self.markers, max_zoom=self.fit_zoom_limit())
