import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.http import HttpResponseForbidden, JsonResponse, StreamingHttpResponse
from django.shortcuts import render, redirect
from django.template.loader import render_to_string
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from .auth_service import sign_up, sign_in, sign_out
from .decorators import role_required
from .forms import SignUpForm, SignInForm, LandRegistrationForm, LandSearchForm, MapKeyForm
from .maps import MapView, get_map_provider
from .maps.keys import cache_session_key, resolve_api_key
from .maps.markers import markers_for, selected_location_marker
from .models import ROLE_ADMIN, ROLE_LANDOWNER
from .queries import search_lands, registrations_for_applicant
from .realtime import change_feed, EventStream
from .records import LandRecord, RegistrationRecord, to_json_dict
from .registration_service import submit_registration, DocumentUploadError
from .session import refresh_viewer_role
from .signals import REGISTRATIONS_TABLE
from .utils import log_audit

logger = logging.getLogger(__name__)

SELECTED_LOCATION_ZOOM = 15


# ============ LIST CONTEXT HELPERS ============
def lands_list_context(lands, show_map=False, show_owner=False, map_id="lands-map"):
    lands = list(lands)
    context = {
        'lands': lands,
        'show_owner': show_owner,
        'lands_map': None,
    }
    if show_map and lands:
        context['lands_map'] = MapView(
            markers=markers_for([LandRecord.from_model(land) for land in lands]),
            height="400px",
            element_id=map_id,
        )
    return context


def search_context(request, owner=None):
    search_form = LandSearchForm(request.GET or None)
    filters = search_form.filters()
    lands = search_lands(owner=owner, **filters)
    context = lands_list_context(lands, show_map=True, show_owner=True)
    context['search_form'] = search_form
    context['filters'] = filters
    return context


def registration_form_map(form):
    """Map for picking the property location; centres on the current pick if any."""
    latitude = form['latitude'].value()
    longitude = form['longitude'].value()
    markers = ()
    try:
        markers = selected_location_marker(latitude, longitude)
    except (TypeError, ValueError, ArithmeticError):
        logger.debug(f"Ignoring unparseable coordinates {latitude!r}, {longitude!r}")

    return MapView(
        markers=markers,
        click_enabled=True,
        height="400px",
        element_id="registration-map",
        max_zoom=SELECTED_LOCATION_ZOOM,
    )


# ============ PUBLIC PAGES ============
def home(request):
    """Landing page"""
    return render(request, 'registry/home.html')


def explore(request):
    """Public search over approved lands"""
    return render(request, 'registry/explore.html', search_context(request))


def explore_results(request):
    """Return rendered results fragment for AJAX search requests."""
    html = render_to_string('registry/lists/_lands.html', search_context(request), request=request)
    return JsonResponse({'html': html})


def lands_api(request):
    """Approved lands as typed JSON records."""
    filters = LandSearchForm(request.GET or None).filters()
    records = [to_json_dict(LandRecord.from_model(land)) for land in search_lands(**filters)]
    return JsonResponse({'lands': records, 'count': len(records)})


# ============ AUTHENTICATION ============
def auth_page(request, sign_in_form=None, sign_up_form=None, active_tab='sign_in'):
    """Sign-in and sign-up forms on one page"""
    if request.user.is_authenticated:
        return redirect('registry:dashboard')

    return render(request, 'auth/auth.html', {
        'sign_in_form': sign_in_form or SignInForm(),
        'sign_up_form': sign_up_form or SignUpForm(),
        'active_tab': active_tab,
    })


@require_POST
def sign_up_view(request):
    form = SignUpForm(request.POST)
    if form.is_valid():
        try:
            sign_up(
                request,
                email=form.cleaned_data['email'],
                password=form.cleaned_data['password'],
                full_name=form.cleaned_data['full_name'],
                role=form.cleaned_data['role'],
            )
            messages.success(request, "Account created successfully!")
            return redirect('registry:dashboard')
        except DatabaseError as e:
            messages.error(request, f"Failed to sign up: {str(e)}")
            logger.error(f"Sign-up error: {str(e)}", exc_info=True)
    else:
        for field, errors in form.errors.items():
            for error in errors:
                messages.error(request, f"{field}: {error}")

    return auth_page(request, sign_up_form=form, active_tab='sign_up')


@require_POST
def sign_in_view(request):
    form = SignInForm(request.POST)
    if form.is_valid():
        user = sign_in(request, form.cleaned_data['email'], form.cleaned_data['password'])
        if user is not None:
            messages.success(request, "Welcome back!")
            next_url = request.POST.get('next')
            if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
                return redirect(next_url)
            return redirect('registry:dashboard')
        messages.error(request, "Invalid email or password.")
    else:
        for field, errors in form.errors.items():
            for error in errors:
                messages.error(request, f"{field}: {error}")

    return auth_page(request, sign_in_form=form, active_tab='sign_in')


@require_POST
def sign_out_view(request):
    sign_out(request)
    messages.success(request, "Signed out successfully")
    return redirect('registry:home')


# ============ DASHBOARD ============
@login_required
def dashboard(request):
    """Resolve the viewer's role and render the matching dashboard"""
    viewer = refresh_viewer_role(request)

    if viewer.role == ROLE_ADMIN:
        from .views_admin import admin_dashboard
        return admin_dashboard(request)
    if viewer.role == ROLE_LANDOWNER:
        return landowner_dashboard(request)

    if viewer.role is None:
        logger.warning(f"User {request.user.pk} has no role; showing the user dashboard")
    context = search_context(request)
    context['page_title'] = 'Explore Lands'
    return render(request, 'registry/dashboards/user.html', context)


def landowner_dashboard(request):
    context = lands_list_context(search_lands(owner=request.user), show_map=True)
    context.update({
        'registrations': registrations_for_applicant(request.user),
        'page_title': 'Land Owner Dashboard',
    })
    return render(request, 'registry/dashboards/landowner.html', context)


@role_required(ROLE_LANDOWNER)
def register_land(request):
    """Submit a new land registration"""
    if request.method == "POST":
        form = LandRegistrationForm(request.POST, request.FILES)

        logger.info(f"User {request.user.username} attempting to register land")

        if form.is_valid():
            try:
                registration = submit_registration(
                    request.user,
                    form.property_data,
                    document=form.cleaned_data.get('document') or None,
                )
                log_audit(
                    request,
                    'submit_registration',
                    object_type='LandRegistration',
                    object_id=registration.id,
                    extra={'title_deed_number': registration.title_deed_number},
                )
                messages.success(request, "Land registration submitted successfully!")
                return redirect('registry:dashboard')

            except DocumentUploadError as e:
                messages.error(request, str(e))
            except (DatabaseError, ValidationError) as e:
                messages.error(request, f"Failed to submit registration: {str(e)}")
                logger.error(f"Error submitting registration: {str(e)}", exc_info=True)
        else:
            # Show form errors
            error_messages = []
            for field, errors in form.errors.items():
                for error in errors:
                    error_msg = f"{field}: {error}"
                    error_messages.append(error_msg)
                    messages.error(request, error_msg)

            logger.error(f"Form validation errors: {error_messages}")
    else:
        form = LandRegistrationForm()

    return render(request, 'registry/register_land.html', {
        'form': form,
        'location_map': registration_form_map(form),
        'page_title': 'Register New Land',
    })


@role_required(ROLE_LANDOWNER)
def my_lands_fragment(request):
    context = lands_list_context(search_lands(owner=request.user), show_map=True)
    html = render_to_string('registry/lists/_lands.html', context, request=request)
    return JsonResponse({'html': html})


@role_required(ROLE_LANDOWNER)
def my_registrations_fragment(request):
    registrations = list(registrations_for_applicant(request.user))
    html = render_to_string('registry/lists/_registrations.html', {
        'registrations': registrations,
    }, request=request)
    records = [to_json_dict(RegistrationRecord.from_model(r)) for r in registrations]
    return JsonResponse({'html': html, 'registrations': records})


# ============ REALTIME ============
@login_required
def registration_events(request):
    """
    Server-Sent Events stream of registration changes. Admins hear every
    change; land owners only changes to their own registrations.
    """
    viewer = refresh_viewer_role(request)
    if viewer.is_admin:
        subscription = change_feed.subscribe(REGISTRATIONS_TABLE)
    elif viewer.is_landowner:
        subscription = change_feed.subscribe(REGISTRATIONS_TABLE, applicant_id=request.user.pk)
    else:
        return HttpResponseForbidden("No registration events for this role")

    stream = EventStream(
        subscription,
        keepalive_seconds=settings.REALTIME_KEEPALIVE_SECONDS,
        retry_ms=settings.REALTIME_RETRY_MS,
    )
    response = StreamingHttpResponse(stream, content_type='text/event-stream')
    response['Cache-Control'] = 'no-cache'
    response['X-Accel-Buffering'] = 'no'
    return response


# ============ MAPS ============
def map_config(request):
    """Key endpoint for the browser: the active provider and its key."""
    provider = get_map_provider()
    key = resolve_api_key(provider, request) if provider.requires_key else ""
    return JsonResponse({
        'provider': provider.name,
        'key': key,
        'center': list(settings.MAP_DEFAULT_CENTER),
        'zoom': settings.MAP_DEFAULT_ZOOM,
    })


@require_POST
def save_map_key(request):
    """Cache a key typed into the map key prompt for this session."""
    form = MapKeyForm(request.POST)
    next_url = request.POST.get('next') or reverse('registry:home')
    if not url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        next_url = reverse('registry:home')

    if form.is_valid():
        cache_session_key(request, form.cleaned_data['provider'], form.cleaned_data['key'])
        messages.success(request, "Map key saved for this session.")
    else:
        messages.error(request, "Please enter a map API key.")
    return redirect(next_url)
