"""
Land registration submission.

Covers the service (one pending row, no land), form validation, document
upload failure and 6 decimal place coordinate handling, plus the view.
"""
from decimal import Decimal
from io import StringIO
from unittest.mock import patch

import pytest
from django.contrib.messages import get_messages
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse

from registry.forms import LandRegistrationForm
from registry.models import AuditLog, Land, LandRegistration
from registry.registration_service import DocumentUploadError, submit_registration

from .conftest import property_fields

pytestmark = pytest.mark.django_db


def form_data(**overrides):
    data = {
        'title_deed_number': 'TD-20001',
        'land_size': '3.75',
        'land_use': 'Agricultural',
        'district': 'Lilongwe',
        'location_name': 'Chinsapo',
        'latitude': '-13.9626341',
        'longitude': '33.7741189',
        'boundaries': '',
    }
    data.update(overrides)
    return data


# =============================================================================
# SERVICE
# =============================================================================

class TestSubmitRegistration:

    def test_creates_one_pending_row_and_no_land(self, landowner):
        registration = submit_registration(landowner, property_fields())

        assert LandRegistration.objects.count() == 1
        assert registration.status == LandRegistration.STATUS_PENDING
        assert registration.applicant == landowner
        assert registration.reviewed_at is None
        assert registration.reviewed_by is None
        assert Land.objects.count() == 0

    def test_document_is_stored_under_applicant(self, landowner):
        document = SimpleUploadedFile('deed.pdf', b'%PDF-1.4 test', content_type='application/pdf')

        registration = submit_registration(landowner, property_fields(), document=document)

        assert registration.document.name.startswith(f'registration_documents/{landowner.pk}/')
        assert registration.document.name.endswith('deed.pdf')

    def test_upload_failure_creates_nothing(self, landowner):
        document = SimpleUploadedFile('deed.pdf', b'%PDF-1.4 test', content_type='application/pdf')

        with patch('django.core.files.storage.FileSystemStorage.save', side_effect=OSError('disk full')):
            with pytest.raises(DocumentUploadError):
                submit_registration(landowner, property_fields(), document=document)

        assert LandRegistration.objects.count() == 0

    def test_property_details_are_immutable(self, landowner):
        registration = submit_registration(landowner, property_fields())
        registration.title_deed_number = 'TD-99999'

        with pytest.raises(ValidationError):
            registration.save()

        registration.refresh_from_db()
        assert registration.title_deed_number == 'TD-10001'


# =============================================================================
# FORM
# =============================================================================

class TestLandRegistrationForm:

    def test_valid_form(self):
        form = LandRegistrationForm(data=form_data())
        assert form.is_valid(), form.errors

    @pytest.mark.parametrize('field', [
        'title_deed_number', 'land_size', 'land_use', 'district',
        'location_name', 'latitude', 'longitude',
    ])
    def test_required_fields(self, field):
        form = LandRegistrationForm(data=form_data(**{field: ''}))
        assert not form.is_valid()
        assert field in form.errors

    def test_boundaries_and_document_optional(self):
        form = LandRegistrationForm(data=form_data(boundaries=''))
        assert form.is_valid(), form.errors
        assert form.cleaned_data['document'] is None

    def test_land_size_must_be_positive(self):
        form = LandRegistrationForm(data=form_data(land_size='0'))
        assert not form.is_valid()
        assert 'land_size' in form.errors

    def test_district_match_is_case_sensitive(self):
        form = LandRegistrationForm(data=form_data(district='lilongwe'))
        assert not form.is_valid()
        assert 'district' in form.errors

    def test_unknown_land_use_rejected(self):
        form = LandRegistrationForm(data=form_data(land_use='Orchard'))
        assert not form.is_valid()
        assert 'land_use' in form.errors

    def test_latitude_out_of_range(self):
        form = LandRegistrationForm(data=form_data(latitude='-91'))
        assert not form.is_valid()
        assert 'latitude' in form.errors

    @pytest.mark.parametrize('field, value', [
        ('latitude', '1e30'),
        ('longitude', '-1e30'),
        ('latitude', '99999999999999999999'),
    ])
    def test_huge_coordinate_is_a_form_error(self, field, value):
        form = LandRegistrationForm(data=form_data(**{field: value}))
        assert not form.is_valid()
        assert field in form.errors

    def test_coordinates_rounded_to_six_places(self):
        form = LandRegistrationForm(data=form_data(latitude='-13.9626345678', longitude='33.77411849'))
        assert form.is_valid(), form.errors
        assert form.cleaned_data['latitude'] == Decimal('-13.962635')
        assert form.cleaned_data['longitude'] == Decimal('33.774118')

    def test_property_data_excludes_document(self):
        form = LandRegistrationForm(data=form_data())
        assert form.is_valid(), form.errors
        assert set(form.property_data) == set(LandRegistration.PROPERTY_FIELDS)


# =============================================================================
# VIEW
# =============================================================================

class TestRegisterLandView:

    def test_landowner_submits_registration(self, client, landowner):
        client.force_login(landowner)

        response = client.post(reverse('registry:register_land'), form_data())

        assert response.status_code == 302
        assert response.url == reverse('registry:dashboard')
        registration = LandRegistration.objects.get()
        assert registration.applicant == landowner
        assert registration.status == LandRegistration.STATUS_PENDING
        assert AuditLog.objects.filter(action='submit_registration', object_id=registration.id).exists()

    def test_coordinates_read_back_with_six_places(self, client, landowner):
        client.force_login(landowner)

        client.post(reverse('registry:register_land'), form_data())

        registration = LandRegistration.objects.get()
        assert registration.latitude == Decimal('-13.962634')
        assert registration.longitude == Decimal('33.774119')
        assert str(registration.latitude) == '-13.962634'

    def test_invalid_submission_keeps_entered_values(self, client, landowner):
        client.force_login(landowner)

        response = client.post(reverse('registry:register_land'), form_data(title_deed_number=''))

        assert response.status_code == 200
        assert LandRegistration.objects.count() == 0
        assert response.context['form']['location_name'].value() == 'Chinsapo'
        assert any(m.level_tag == 'error' for m in get_messages(response.wsgi_request))

    def test_upload_failure_reports_error(self, client, landowner):
        client.force_login(landowner)
        data = form_data()
        data['document'] = SimpleUploadedFile('deed.pdf', b'%PDF-1.4 test', content_type='application/pdf')

        with patch('django.core.files.storage.FileSystemStorage.save', side_effect=OSError('disk full')):
            response = client.post(reverse('registry:register_land'), data)

        assert response.status_code == 200
        assert LandRegistration.objects.count() == 0
        errors = [str(m) for m in get_messages(response.wsgi_request)]
        assert any('Could not upload document' in e for e in errors)

    def test_huge_latitude_re_renders_form(self, client, landowner):
        client.force_login(landowner)

        response = client.post(reverse('registry:register_land'), form_data(latitude='1e30'))

        assert response.status_code == 200
        assert LandRegistration.objects.count() == 0
        assert 'latitude' in response.context['form'].errors
        assert response.context['location_map'].markers == ()

    def test_selected_location_marker_after_failed_submit(self, client, landowner):
        client.force_login(landowner)

        response = client.post(reverse('registry:register_land'), form_data(title_deed_number=''))

        location_map = response.context['location_map']
        assert len(location_map.markers) == 1
        assert location_map.markers[0].id == 'selected'
        assert location_map.click_enabled
        assert location_map.viewport().zoom == 15

    def test_general_user_cannot_register(self, client, general_user):
        client.force_login(general_user)

        response = client.post(reverse('registry:register_land'), form_data())

        assert response.status_code == 302
        assert response.url == reverse('registry:dashboard')
        assert LandRegistration.objects.count() == 0

    def test_anonymous_redirected_to_sign_in(self, client):
        response = client.get(reverse('registry:register_land'))

        assert response.status_code == 302
        assert response.url.startswith('/auth/')


def test_seed_registrations_command(landowner):
    out = StringIO()

    call_command('seed_registrations', '--count', '3', '--applicant', 'Owner@Example.com', stdout=out)

    assert LandRegistration.objects.filter(applicant=landowner, status=LandRegistration.STATUS_PENDING).count() == 3
    assert 'Created 3 pending registrations' in out.getvalue()
