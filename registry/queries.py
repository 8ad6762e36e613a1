# registry/queries.py
"""Parameterised reads behind the list views."""
from django.db.models import Q

from .models import Land, LandRegistration, Profile


def search_lands(owner=None, query="", district="", land_use=""):
    """
    Active lands, optionally narrowed by owner, free text (title deed number
    or location name, case-insensitive), and exact, case-sensitive district
    and land use.
    """
    lands = Land.objects.filter(status=Land.STATUS_ACTIVE).select_related('owner__profile')

    if owner is not None:
        lands = lands.filter(owner=owner)
    if query:
        lands = lands.filter(Q(title_deed_number__icontains=query) | Q(location_name__icontains=query))
    if district:
        lands = lands.filter(district__exact=district)
    if land_use:
        lands = lands.filter(land_use__exact=land_use)

    return lands.order_by('-created_at')


def registrations_for_applicant(applicant):
    return LandRegistration.objects.filter(applicant=applicant).order_by('-submitted_at')


def pending_registrations():
    """Review queue, oldest submission first."""
    return LandRegistration.objects.filter(
        status=LandRegistration.STATUS_PENDING
    ).select_related('applicant__profile').order_by('submitted_at')


def dashboard_stats():
    return {
        'total_lands': Land.objects.count(),
        'pending_registrations': LandRegistration.objects.filter(
            status=LandRegistration.STATUS_PENDING
        ).count(),
        'total_users': Profile.objects.count(),
    }


def users_with_roles():
    return Profile.objects.select_related('user', 'user__role_assignment').order_by('full_name')
