from django.utils.functional import SimpleLazyObject

from .session import get_viewer_session


class ViewerSessionMiddleware:
    """Attach the viewer session context (profile + role) as request.viewer."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.viewer = SimpleLazyObject(lambda: get_viewer_session(request))
        return self.get_response(request)
