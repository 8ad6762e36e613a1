# registry/views_admin.py
import logging

from django.contrib import messages
from django.contrib.auth.models import User
from django.db import DatabaseError
from django.http import JsonResponse
from django.shortcuts import render, get_object_or_404, redirect
from django.template.loader import render_to_string
from django.views.decorators.http import require_POST

from .approval_service import ApprovalService, RegistrationStateError
from .auth_service import assign_role
from .decorators import role_required
from .forms import ReviewForm, RoleAssignmentForm
from .maps import MapView
from .maps.markers import marker_for
from .models import LandRegistration, ROLE_ADMIN
from .queries import pending_registrations, dashboard_stats, users_with_roles
from .records import RegistrationRecord, to_json_dict
from .utils import log_audit

logger = logging.getLogger(__name__)

REVIEW_MAP_ZOOM = 15


def pending_review_rows():
    """Pending registrations, each paired with its own small location map."""
    rows = []
    for registration in pending_registrations():
        record = RegistrationRecord.from_model(registration)
        marker = marker_for(record, title=record.title_deed_number)
        rows.append({
            'registration': registration,
            'record': record,
            'map': MapView(
                markers=(marker,),
                height="300px",
                element_id=f"registration-map-{registration.id}",
                max_zoom=REVIEW_MAP_ZOOM,
            ),
        })
    return rows


def admin_dashboard(request):
    """Review queue and headline numbers. Reached through the dashboard view."""
    context = {
        'stats': dashboard_stats(),
        'pending_rows': pending_review_rows(),
        'review_form': ReviewForm(),
        'page_title': 'Admin Dashboard',
    }
    return render(request, 'registry/dashboards/admin.html', context)


@role_required(ROLE_ADMIN)
def pending_registrations_fragment(request):
    rows = pending_review_rows()
    html = render_to_string('registry/lists/_pending.html', {
        'pending_rows': rows,
        'review_form': ReviewForm(),
    }, request=request)
    return JsonResponse({
        'html': html,
        'stats': dashboard_stats(),
        'registrations': [to_json_dict(row['record']) for row in rows],
    })


# ============ REVIEW ACTIONS ============
@role_required(ROLE_ADMIN)
@require_POST
def approve_registration(request, registration_id):
    """Approve a pending registration and create the land record"""
    form = ReviewForm(request.POST)
    notes = form.cleaned_data['notes'] if form.is_valid() else ""

    try:
        land = ApprovalService.approve(registration_id, request.user, notes)
    except LandRegistration.DoesNotExist:
        messages.error(request, "Registration not found.")
        return redirect('registry:dashboard')
    except RegistrationStateError as e:
        messages.error(request, f"Registration was already {e.registration.get_status_display().lower()}.")
        return redirect('registry:dashboard')
    except DatabaseError as e:
        logger.error(f"❌ Approval of registration {registration_id} failed: {str(e)}", exc_info=True)
        messages.error(request, f"Failed to approve registration: {str(e)}")
        return redirect('registry:dashboard')

    log_audit(
        request,
        'approve_registration',
        object_type='LandRegistration',
        object_id=registration_id,
        extra={'land_id': land.id, 'notes': notes},
    )
    messages.success(request, f"Registration '{land.title_deed_number}' has been approved!")
    return redirect('registry:dashboard')


@role_required(ROLE_ADMIN)
@require_POST
def reject_registration(request, registration_id):
    """Reject a pending registration"""
    form = ReviewForm(request.POST)
    notes = form.cleaned_data['notes'] if form.is_valid() else ""

    try:
        registration = ApprovalService.reject(registration_id, request.user, notes)
    except LandRegistration.DoesNotExist:
        messages.error(request, "Registration not found.")
        return redirect('registry:dashboard')
    except RegistrationStateError as e:
        messages.error(request, f"Registration was already {e.registration.get_status_display().lower()}.")
        return redirect('registry:dashboard')
    except DatabaseError as e:
        logger.error(f"❌ Rejection of registration {registration_id} failed: {str(e)}", exc_info=True)
        messages.error(request, f"Failed to reject registration: {str(e)}")
        return redirect('registry:dashboard')

    log_audit(
        request,
        'reject_registration',
        object_type='LandRegistration',
        object_id=registration_id,
        extra={'notes': notes},
    )
    messages.warning(request, f"Registration '{registration.title_deed_number}' has been rejected.")
    return redirect('registry:dashboard')


# ============ USER MANAGEMENT ============
@role_required(ROLE_ADMIN)
def user_management(request):
    """All profiles with their current role"""
    profiles = users_with_roles()
    return render(request, 'registry/user_management.html', {
        'profiles': profiles,
        'role_form': RoleAssignmentForm(),
        'page_title': 'User Management',
    })


@role_required(ROLE_ADMIN)
@require_POST
def update_user_role(request, user_id):
    user = get_object_or_404(User, pk=user_id)
    form = RoleAssignmentForm(request.POST)

    if not form.is_valid():
        messages.error(request, "Please choose a valid role.")
        return redirect('registry:user_management')

    new_role = form.cleaned_data['role']
    previous = getattr(getattr(user, 'profile', None), 'role', None)
    try:
        assign_role(user, new_role)
    except DatabaseError as e:
        logger.error(f"❌ Failed to change role for user {user.pk}: {str(e)}", exc_info=True)
        messages.error(request, f"Failed to update role: {str(e)}")
        return redirect('registry:user_management')

    log_audit(
        request,
        'change_role',
        object_type='UserRole',
        object_id=user.pk,
        extra={'from': previous, 'to': new_role},
    )
    messages.success(request, f"Role for {user.email or user.username} updated to {new_role}.")
    return redirect('registry:user_management')
