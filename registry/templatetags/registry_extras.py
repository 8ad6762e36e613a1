# registry/templatetags/registry_extras.py
from django import template
from django.utils.html import format_html

register = template.Library()

STATUS_CLASSES = {
    'pending': 'bg-warning text-dark',
    'approved': 'bg-success',
    'rejected': 'bg-danger',
    'active': 'bg-success',
}


@register.filter
def title_with_spaces(value):
    """Convert snake_case to Title Case with spaces"""
    return str(value).replace('_', ' ').title()


@register.filter
def coordinate(value, places=4):
    """Format a latitude/longitude for display, e.g. -13.9626"""
    if value in (None, ''):
        return ''
    try:
        return f"{float(value):.{int(places)}f}"
    except (ValueError, TypeError):
        return value


@register.simple_tag
def status_badge(status, label=None):
    return format_html(
        '<span class="badge {}">{}</span>',
        STATUS_CLASSES.get(status, 'bg-secondary'),
        label or title_with_spaces(status),
    )
