from .base import LatLng, MapMarker, Bounds, Viewport, MapView, frame_markers
from .providers import MapProvider, get_map_provider, PROVIDERS

__all__ = [
    'LatLng',
    'MapMarker',
    'Bounds',
    'Viewport',
    'MapView',
    'frame_markers',
    'MapProvider',
    'get_map_provider',
    'PROVIDERS',
]
