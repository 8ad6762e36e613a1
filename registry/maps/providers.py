# registry/maps/providers.py
"""
Map rendering backends. All providers take the same MapView and differ only
in how the browser draws it. The active provider is settings.MAP_PROVIDER.
"""
import json
import logging
from functools import lru_cache
from pathlib import Path
from urllib.parse import urlencode

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.template.loader import render_to_string

from .keys import resolve_api_key

logger = logging.getLogger(__name__)

BOUNDARY_FILE = Path(__file__).resolve().parent.parent / "data" / "malawi_boundary.geojson"


@lru_cache(maxsize=1)
def load_boundary():
    """Static national boundary polygon drawn by the vector-tile provider."""
    with open(BOUNDARY_FILE, "r", encoding="utf-8") as f:
        return json.load(f)


class MapProvider:
    name = None
    template_name = None
    requires_key = False
    uses_key_endpoint = False
    supports_click = True

    def get_context(self, map_view, viewport, api_key):
        return {}

    def client_config(self, map_view, viewport):
        """Settings handed to the browser as JSON."""
        return {
            'provider': self.name,
            'elementId': map_view.element_id,
            'center': [viewport.center.lng, viewport.center.lat],
            'zoom': viewport.zoom,
            'bounds': viewport.bounds.as_lng_lat_pairs() if viewport.bounds else None,
            'maxZoom': map_view.fit_zoom_limit(),
            'markers': [marker.as_json() for marker in map_view.markers],
            'clickEnabled': map_view.click_enabled and self.supports_click,
            'latitudeField': map_view.latitude_field,
            'longitudeField': map_view.longitude_field,
        }

    def render(self, map_view, request=None):
        api_key = ""
        if self.requires_key:
            api_key = resolve_api_key(self, request)
            if not api_key:
                logger.info(f"No API key for map provider '{self.name}', showing key prompt")
                return render_to_string('registry/maps/key_prompt.html', {
                    'provider': self,
                    'map': map_view,
                    'next_url': request.get_full_path() if request is not None else '/',
                }, request=request)

        viewport = map_view.viewport()
        context = {
            'provider': self,
            'map': map_view,
            'viewport': viewport,
            'config': self.client_config(map_view, viewport),
            'config_id': f"{map_view.element_id}-config",
        }
        context.update(self.get_context(map_view, viewport, api_key))
        return render_to_string(self.template_name, context, request=request)


class MapLibreProvider(MapProvider):
    """Vector tiles from a hosted style server."""
    name = 'maplibre'
    template_name = 'registry/maps/maplibre.html'
    requires_key = True

    STYLE_URL = "https://api.maptiler.com/maps/streets-v2/style.json"

    def style_url(self, api_key):
        return f"{self.STYLE_URL}?{urlencode({'key': api_key})}"

    def get_context(self, map_view, viewport, api_key):
        return {
            'style_url': self.style_url(api_key),
            'boundary': load_boundary(),
            'boundary_id': f"{map_view.element_id}-boundary",
        }


class GoogleMapsProvider(MapProvider):
    """Commercial JS SDK loaded by injecting a script tag."""
    name = 'google'
    template_name = 'registry/maps/google.html'
    requires_key = True
    uses_key_endpoint = True

    SDK_URL = "https://maps.googleapis.com/maps/api/js"

    def sdk_url(self, api_key):
        return f"{self.SDK_URL}?{urlencode({'key': api_key, 'callback': 'registryInitGoogleMaps'})}"

    def get_context(self, map_view, viewport, api_key):
        return {'sdk_url': self.sdk_url(api_key)}


class EmbedMapProvider(MapProvider):
    """Hosted map page in an iframe. No key, no click reporting."""
    name = 'embed'
    template_name = 'registry/maps/embed.html'
    supports_click = False

    EMBED_URL = "https://www.openstreetmap.org/export/embed.html"
    # Keeps a single framed marker from collapsing to a zero-area box
    MIN_PADDING_DEGREES = 0.01

    def bbox(self, viewport):
        if viewport.bounds is not None:
            bounds = viewport.bounds.padded(max(viewport.bounds.span * 0.1, self.MIN_PADDING_DEGREES))
            return bounds.west, bounds.south, bounds.east, bounds.north
        half_width = 180.0 / (2 ** viewport.zoom)
        half_height = half_width / 2
        center = viewport.center
        return (
            center.lng - half_width,
            center.lat - half_height,
            center.lng + half_width,
            center.lat + half_height,
        )

    def embed_url(self, map_view, viewport):
        params = {
            'bbox': ",".join(f"{value:.6f}" for value in self.bbox(viewport)),
            'layer': 'mapnik',
        }
        # The embed can only pin one location
        if len(map_view.markers) == 1:
            position = map_view.markers[0].position
            params['marker'] = f"{position.lat:.6f},{position.lng:.6f}"
        return f"{self.EMBED_URL}?{urlencode(params)}"

    def get_context(self, map_view, viewport, api_key):
        return {'embed_url': self.embed_url(map_view, viewport)}


PROVIDERS = {
    provider.name: provider
    for provider in (MapLibreProvider(), GoogleMapsProvider(), EmbedMapProvider())
}


def get_map_provider(name=None):
    name = name or settings.MAP_PROVIDER
    try:
        return PROVIDERS[name]
    except KeyError:
        raise ImproperlyConfigured(
            f"Unknown MAP_PROVIDER '{name}'. Choose one of: {', '.join(sorted(PROVIDERS))}"
        )
