"""
Shared pytest fixtures for registry tests.
"""
from decimal import Decimal

import pytest
from django.contrib.auth.models import User
from django.core.cache import cache

from registry.auth_service import assign_role
from registry.models import Land, ROLE_ADMIN, ROLE_LANDOWNER, ROLE_USER
from registry.registration_service import submit_registration

DEFAULT_PASSWORD = 'testpass123'


def property_fields(**overrides):
    """Valid property details for a registration or land."""
    fields = {
        'title_deed_number': 'TD-10001',
        'land_size': Decimal('2.50'),
        'land_use': 'Residential',
        'location_name': 'Area 47, Lilongwe',
        'latitude': Decimal('-13.962634'),
        'longitude': Decimal('33.774119'),
        'district': 'Lilongwe',
        'boundaries': 'Footpath to the north',
    }
    fields.update(overrides)
    return fields


@pytest.fixture(autouse=True)
def registry_settings(settings, tmp_path):
    """Keep tests offline and uploads out of the project tree."""
    settings.MAP_PROVIDER = 'embed'
    settings.MAP_PROVIDER_KEYS = {'maplibre': '', 'google': ''}
    settings.MAP_KEY_ENDPOINT = ''
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    settings.REALTIME_KEEPALIVE_SECONDS = 0.05
    cache.clear()
    yield settings
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make_user(email, role=None, full_name='Test User', password=DEFAULT_PASSWORD, **extra):
        first_name, _, last_name = full_name.partition(' ')
        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **extra
        )
        if role:
            assign_role(user, role)
        return user
    return _make_user


@pytest.fixture
def landowner(make_user):
    return make_user('owner@example.com', ROLE_LANDOWNER, 'Chikondi Banda')


@pytest.fixture
def other_landowner(make_user):
    return make_user('owner2@example.com', ROLE_LANDOWNER, 'Madalitso Tembo')


@pytest.fixture
def admin_user(make_user):
    return make_user('admin@example.com', ROLE_ADMIN, 'Thandiwe Phiri')


@pytest.fixture
def general_user(make_user):
    return make_user('user@example.com', ROLE_USER, 'Kondwani Mwale')


@pytest.fixture
def make_registration(db):
    def _make_registration(applicant, **overrides):
        return submit_registration(applicant, property_fields(**overrides))
    return _make_registration


@pytest.fixture
def make_land(db):
    def _make_land(owner, **overrides):
        return Land.objects.create(owner=owner, **property_fields(**overrides))
    return _make_land
