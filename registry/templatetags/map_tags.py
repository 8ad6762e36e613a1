# registry/templatetags/map_tags.py
from django import template
from django.utils.safestring import mark_safe

from ..maps import get_map_provider

register = template.Library()


@register.simple_tag(takes_context=True)
def render_map(context, map_view):
    """Draw a MapView with whichever provider MAP_PROVIDER selects."""
    if map_view is None:
        return ''
    request = context.get('request')
    return mark_safe(get_map_provider().render(map_view, request))


@register.simple_tag
def map_provider_name():
    return get_map_provider().name
