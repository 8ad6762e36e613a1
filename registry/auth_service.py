# registry/auth_service.py
import logging

from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.models import User
from django.db import DatabaseError, transaction

from .models import Profile, UserRole
from .utils import log_audit

logger = logging.getLogger(__name__)


def assign_role(user, role):
    """Create or replace the user's single role assignment."""
    assignment, created = UserRole.objects.update_or_create(user=user, defaults={'role': role})
    return assignment


def sign_up(request, email, password, full_name, role):
    """
    Create an identity with its profile, then its role assignment, and sign
    it in. A failed role insert is logged and leaves the identity without a
    role rather than failing the sign-up.
    """
    first_name, _, last_name = full_name.strip().partition(' ')

    with transaction.atomic():
        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
            first_name=first_name[:150],
            last_name=last_name[:150],
        )
        Profile.objects.update_or_create(user=user, defaults={'full_name': full_name.strip()})

    try:
        with transaction.atomic():
            UserRole.objects.create(user=user, role=role)
    except DatabaseError as e:
        logger.error(f"Role assignment error for {email} (role={role}): {str(e)}", exc_info=True)

    login(request, user, backend='django.contrib.auth.backends.ModelBackend')
    log_audit(request, 'sign_up', object_type='User', object_id=user.pk, extra={'role': role}, user=user)
    logger.info(f"✅ New account created for {email}")
    return user


def sign_in(request, email, password):
    """Exchange credentials for a session. Returns the user, or None on bad credentials."""
    user = authenticate(request, username=email, password=password)
    if user is None:
        log_audit(request, 'failed_sign_in', object_type='User', extra={'email': email})
        logger.info(f"Failed sign-in for {email}")
        return None

    login(request, user)
    log_audit(request, 'sign_in', object_type='User', object_id=user.pk, user=user)
    return user


def sign_out(request):
    if request.user.is_authenticated:
        log_audit(request, 'sign_out', object_type='User', object_id=request.user.pk)
        logger.info(f"{request.user.username} signed out")
    logout(request)
