# registry/maps/keys.py
import logging

import requests
from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

SESSION_KEYS = 'map_api_keys'
KEY_ENDPOINT_TIMEOUT = 10
KEY_CACHE_TTL = 60 * 60
# Failures are remembered briefly so one page does not retry for every map
KEY_FAILURE_CACHE_TTL = 60


def fetch_key_from_endpoint(url):
    """Ask the key function endpoint for a provider key. Returns "" on any failure."""
    try:
        response = requests.get(url, timeout=KEY_ENDPOINT_TIMEOUT)
        response.raise_for_status()
        key = response.json().get('key', '')
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Map key endpoint {url} failed: {str(e)}")
        return ""
    if not key:
        logger.warning(f"Map key endpoint {url} returned no key")
    return key or ""


def endpoint_key(url):
    """Key from the endpoint, fetched at most once per cache period."""
    cache_key = f"map_key_endpoint:{url}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    key = fetch_key_from_endpoint(url)
    cache.set(cache_key, key, KEY_CACHE_TTL if key else KEY_FAILURE_CACHE_TTL)
    return key


def session_key(request, provider_name):
    session = getattr(request, 'session', None)
    if session is None:
        return ""
    return session.get(SESSION_KEYS, {}).get(provider_name, "")


def cache_session_key(request, provider_name, key):
    """Remember a key typed into the key prompt for the rest of the session."""
    keys = dict(request.session.get(SESSION_KEYS, {}))
    keys[provider_name] = key.strip()
    request.session[SESSION_KEYS] = keys


def resolve_api_key(provider, request=None):
    """
    Key lookup order: settings/environment, then the key endpoint (for
    providers that use one), then a key prompted for in this session.
    """
    key = settings.MAP_PROVIDER_KEYS.get(provider.name, "")
    if key:
        return key

    if provider.uses_key_endpoint and settings.MAP_KEY_ENDPOINT:
        key = endpoint_key(settings.MAP_KEY_ENDPOINT)
        if key:
            return key

    return session_key(request, provider.name)
