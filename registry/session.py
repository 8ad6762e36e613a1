# registry/session.py
"""
Process-wide viewer session context.

The signed-in viewer's profile and role are loaded once at sign-in, cached
in the Django session and cleared at sign-out. Views read request.viewer
instead of querying profile/role tables themselves.
"""
import logging
from dataclasses import dataclass, asdict
from typing import Optional

from .models import Profile, UserRole, ROLE_ADMIN, ROLE_LANDOWNER

logger = logging.getLogger(__name__)

SESSION_KEY = 'viewer'


@dataclass(frozen=True)
class ViewerSession:
    user_id: Optional[int] = None
    email: str = ""
    full_name: str = ""
    role: Optional[str] = None

    @property
    def is_authenticated(self):
        return self.user_id is not None

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    @property
    def is_landowner(self):
        return self.role == ROLE_LANDOWNER

    @property
    def display_name(self):
        return self.full_name or self.email


ANONYMOUS_VIEWER = ViewerSession()


def resolve_role(user):
    """Current role for a user, read from the role table."""
    assignment = UserRole.objects.filter(user=user).values_list('role', flat=True).first()
    if assignment:
        return assignment
    if user.is_superuser:
        return ROLE_ADMIN
    return None


def build_viewer_session(user):
    full_name = Profile.objects.filter(user=user).values_list('full_name', flat=True).first() or ""
    return ViewerSession(
        user_id=user.pk,
        email=user.email,
        full_name=full_name or user.get_full_name(),
        role=resolve_role(user),
    )


def load_viewer_session(request, user):
    viewer = build_viewer_session(user)
    request.session[SESSION_KEY] = asdict(viewer)
    return viewer


def clear_viewer_session(request):
    request.session.pop(SESSION_KEY, None)
    return ANONYMOUS_VIEWER


def get_viewer_session(request):
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return ANONYMOUS_VIEWER

    stored = request.session.get(SESSION_KEY)
    if stored and stored.get('user_id') == user.pk:
        return ViewerSession(**stored)

    # Session predates the context (or belongs to another identity)
    return load_viewer_session(request, user)


def refresh_viewer_role(request):
    """Re-resolve the role from the database, updating the cached context if it changed."""
    viewer = get_viewer_session(request)
    if not viewer.is_authenticated:
        return viewer
    role = resolve_role(request.user)
    if role != viewer.role:
        logger.info(f"Role for user {viewer.user_id} changed from {viewer.role} to {role}")
        viewer = ViewerSession(
            user_id=viewer.user_id,
            email=viewer.email,
            full_name=viewer.full_name,
            role=role,
        )
        request.session[SESSION_KEY] = asdict(viewer)
    request.viewer = viewer
    return viewer
