from functools import wraps

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect

from .session import refresh_viewer_role


def role_required(*roles):
    """Allow the view only for signed-in viewers holding one of `roles`."""
    def decorator(view_func):
        @wraps(view_func)
        @login_required
        def _wrapped(request, *args, **kwargs):
            viewer = refresh_viewer_role(request)
            if viewer.role not in roles:
                messages.error(request, "You don't have permission to access that page.")
                return redirect('registry:dashboard')
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator
