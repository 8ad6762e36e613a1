"""
Review workflow: pending -> approved (creates a land) or rejected.

Run with: pytest tests/test_approval.py -v
"""
from unittest.mock import patch

import pytest
from django.contrib import admin
from django.contrib.messages import get_messages
from django.contrib.staticfiles import finders
from django.contrib.messages.storage.fallback import FallbackStorage
from django.contrib.sessions.middleware import SessionMiddleware
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import RequestFactory
from django.urls import reverse

from registry.approval_service import (
    ApprovalService,
    RegistrationStateError,
    DEFAULT_APPROVAL_NOTES,
    DEFAULT_REJECTION_NOTES,
)
from registry.models import AuditLog, Land, LandRegistration

pytestmark = pytest.mark.django_db


# =============================================================================
# SERVICE
# =============================================================================

class TestApprove:

    def test_copies_property_fields_to_land(self, landowner, admin_user, make_registration):
        registration = make_registration(landowner, district='Blantyre', land_use='Commercial')

        land = ApprovalService.approve(registration.id, admin_user)

        land.refresh_from_db()
        for field in LandRegistration.PROPERTY_FIELDS:
            assert getattr(land, field) == getattr(registration, field), field
        assert land.owner == landowner
        assert land.registration_id == registration.id
        assert land.status == Land.STATUS_ACTIVE

    def test_marks_registration_reviewed(self, landowner, admin_user, make_registration):
        registration = make_registration(landowner)

        ApprovalService.approve(registration.id, admin_user, notes='Survey plan checked')

        registration.refresh_from_db()
        assert registration.status == LandRegistration.STATUS_APPROVED
        assert registration.reviewed_by == admin_user
        assert registration.reviewed_at is not None
        assert registration.admin_notes == 'Survey plan checked'

    def test_default_notes(self, landowner, admin_user, make_registration):
        registration = make_registration(landowner)

        ApprovalService.approve(registration.id, admin_user)

        registration.refresh_from_db()
        assert registration.admin_notes == DEFAULT_APPROVAL_NOTES

    def test_second_approval_refused(self, landowner, admin_user, make_registration):
        registration = make_registration(landowner)
        ApprovalService.approve(registration.id, admin_user)

        with pytest.raises(RegistrationStateError):
            ApprovalService.approve(registration.id, admin_user)

        assert Land.objects.filter(registration=registration).count() == 1

    def test_failed_status_update_rolls_back_land(self, landowner, admin_user, make_registration):
        registration = make_registration(landowner)

        with patch.object(LandRegistration, 'mark_reviewed', side_effect=DatabaseError('update failed')):
            with pytest.raises(DatabaseError):
                ApprovalService.approve(registration.id, admin_user)

        assert not Land.objects.exists()
        registration.refresh_from_db()
        assert registration.is_pending
        assert registration.reviewed_by is None

        land = ApprovalService.approve(registration.id, admin_user)
        assert Land.objects.get() == land

    def test_unknown_registration(self, admin_user):
        with pytest.raises(LandRegistration.DoesNotExist):
            ApprovalService.approve(999999, admin_user)


class TestTerminalStates:

    @pytest.mark.parametrize('review, new_status', [
        (ApprovalService.reject, LandRegistration.STATUS_APPROVED),
        (ApprovalService.reject, LandRegistration.STATUS_PENDING),
        (ApprovalService.approve, LandRegistration.STATUS_PENDING),
        (ApprovalService.approve, LandRegistration.STATUS_REJECTED),
    ])
    def test_reviewed_status_cannot_change(self, landowner, admin_user, make_registration, review, new_status):
        registration = make_registration(landowner)
        review(registration.id, admin_user)
        registration.refresh_from_db()
        reviewed_status = registration.status

        registration.status = new_status
        with pytest.raises(ValidationError):
            registration.save()

        registration.refresh_from_db()
        assert registration.status == reviewed_status

    def test_rejected_registration_never_gains_land(self, landowner, admin_user, make_registration):
        registration = make_registration(landowner)
        ApprovalService.reject(registration.id, admin_user)
        registration.refresh_from_db()

        registration.status = LandRegistration.STATUS_APPROVED
        with pytest.raises(ValidationError):
            registration.save()

        assert not Land.objects.filter(registration=registration).exists()


class TestReject:

    def test_reject_creates_no_land(self, landowner, admin_user, make_registration):
        registration = make_registration(landowner)

        ApprovalService.reject(registration.id, admin_user)

        registration.refresh_from_db()
        assert registration.status == LandRegistration.STATUS_REJECTED
        assert registration.reviewed_by == admin_user
        assert registration.reviewed_at is not None
        assert registration.admin_notes == DEFAULT_REJECTION_NOTES
        assert Land.objects.count() == 0

    def test_cannot_reject_approved(self, landowner, admin_user, make_registration):
        registration = make_registration(landowner)
        ApprovalService.approve(registration.id, admin_user)

        with pytest.raises(RegistrationStateError):
            ApprovalService.reject(registration.id, admin_user)

        registration.refresh_from_db()
        assert registration.status == LandRegistration.STATUS_APPROVED


# =============================================================================
# VIEWS
# =============================================================================

class TestReviewViews:

    def test_admin_approves(self, client, landowner, admin_user, make_registration):
        registration = make_registration(landowner)
        client.force_login(admin_user)

        response = client.post(
            reverse('registry:approve_registration', args=[registration.id]),
            {'notes': 'Looks good'},
        )

        assert response.status_code == 302
        land = Land.objects.get(registration=registration)
        assert land.owner == landowner
        registration.refresh_from_db()
        assert registration.admin_notes == 'Looks good'
        assert AuditLog.objects.filter(action='approve_registration', object_id=registration.id).exists()

    def test_admin_rejects(self, client, landowner, admin_user, make_registration):
        registration = make_registration(landowner)
        client.force_login(admin_user)

        response = client.post(reverse('registry:reject_registration', args=[registration.id]))

        assert response.status_code == 302
        registration.refresh_from_db()
        assert registration.status == LandRegistration.STATUS_REJECTED
        assert not Land.objects.exists()
        assert AuditLog.objects.filter(action='reject_registration', object_id=registration.id).exists()

    def test_repeat_approval_reports_error(self, client, landowner, admin_user, make_registration):
        registration = make_registration(landowner)
        client.force_login(admin_user)
        url = reverse('registry:approve_registration', args=[registration.id])
        client.post(url)

        response = client.post(url)

        assert response.status_code == 302
        assert Land.objects.count() == 1
        levels = [m.level_tag for m in get_messages(response.wsgi_request)]
        assert 'error' in levels

    def test_database_failure_reported(self, client, landowner, admin_user, make_registration):
        registration = make_registration(landowner)
        client.force_login(admin_user)

        with patch.object(LandRegistration, 'mark_reviewed', side_effect=DatabaseError('update failed')):
            response = client.post(reverse('registry:approve_registration', args=[registration.id]))

        assert response.status_code == 302
        assert not Land.objects.exists()
        registration.refresh_from_db()
        assert registration.is_pending
        levels = [m.level_tag for m in get_messages(response.wsgi_request)]
        assert 'error' in levels

    def test_missing_registration(self, client, admin_user):
        client.force_login(admin_user)

        response = client.post(reverse('registry:approve_registration', args=[424242]))

        assert response.status_code == 302
        assert not Land.objects.exists()

    def test_landowner_cannot_approve(self, client, landowner, make_registration):
        registration = make_registration(landowner)
        client.force_login(landowner)

        response = client.post(reverse('registry:approve_registration', args=[registration.id]))

        assert response.status_code == 302
        registration.refresh_from_db()
        assert registration.is_pending
        assert not Land.objects.exists()

    def test_approve_requires_post(self, client, landowner, admin_user, make_registration):
        registration = make_registration(landowner)
        client.force_login(admin_user)

        response = client.get(reverse('registry:approve_registration', args=[registration.id]))

        assert response.status_code == 405

    def test_pending_fragment_lists_oldest_first(self, client, landowner, admin_user, make_registration):
        first = make_registration(landowner, title_deed_number='TD-00001')
        second = make_registration(landowner, title_deed_number='TD-00002')
        LandRegistration.objects.filter(pk=first.pk).update(submitted_at=second.submitted_at.replace(year=2020))
        client.force_login(admin_user)

        response = client.get(reverse('registry:pending_fragment'))

        assert response.status_code == 200
        html = response.json()['html']
        assert html.index('TD-00001') < html.index('TD-00002')
        assert f'registration-map-{first.id}' in html
        assert response.json()['stats']['pending_registrations'] == 2

    def test_review_buttons_post_to_their_own_actions(self, client, landowner, admin_user, make_registration):
        registration = make_registration(landowner)
        client.force_login(admin_user)

        html = client.get(reverse('registry:pending_fragment')).json()['html']

        approve_url = reverse('registry:approve_registration', args=[registration.id])
        reject_url = reverse('registry:reject_registration', args=[registration.id])
        assert f'action="{approve_url}"' in html
        assert f'formaction="{reject_url}"' in html
        assert '<button type="submit" class="btn btn-success">Approve</button>' in html

    def test_review_script_only_follows_explicit_formaction(self):
        with open(finders.find('registry/js/registry.js'), encoding='utf-8') as f:
            script = f.read()

        assert 'getAttribute("formaction")' in script
        assert '.formAction' not in script

    def test_admin_dashboard_pairs_each_row_with_map(self, client, landowner, admin_user, make_registration):
        registration = make_registration(landowner)
        client.force_login(admin_user)

        response = client.get(reverse('registry:dashboard'))

        rows = response.context['pending_rows']
        assert len(rows) == 1
        row_map = rows[0]['map']
        assert row_map.element_id == f'registration-map-{registration.id}'
        assert row_map.max_zoom == 15
        viewport = row_map.viewport()
        assert viewport.zoom == 15
        assert viewport.center == row_map.markers[0].position
        assert len(row_map.markers) == 1


# =============================================================================
# DJANGO ADMIN
# =============================================================================

def admin_request(user):
    request = RequestFactory().post('/admin/registry/landregistration/')
    SessionMiddleware(lambda r: None).process_request(request)
    request.user = user
    request._messages = FallbackStorage(request)
    return request


class TestRegistrationAdmin:

    def test_review_fields_read_only(self, admin_user):
        model_admin = admin.site._registry[LandRegistration]

        readonly = model_admin.get_readonly_fields(admin_request(admin_user))

        assert {'status', 'admin_notes', 'reviewed_by', 'reviewed_at'} <= set(readonly)

    def test_bulk_approve_reports_skipped(self, landowner, admin_user, make_registration):
        reviewed = make_registration(landowner, title_deed_number='TD-00001')
        pending = make_registration(landowner, title_deed_number='TD-00002')
        ApprovalService.reject(reviewed.id, admin_user)
        model_admin = admin.site._registry[LandRegistration]
        request = admin_request(admin_user)

        model_admin.approve_selected(request, LandRegistration.objects.filter(pk__in=[reviewed.pk, pending.pk]))

        assert Land.objects.filter(registration=pending).exists()
        assert not Land.objects.filter(registration=reviewed).exists()
        sent = [(m.level_tag, str(m)) for m in get_messages(request)]
        assert ('info', '1 registration(s) approved.') in sent
        assert ('warning', '1 registration(s) skipped because they were already reviewed.') in sent
