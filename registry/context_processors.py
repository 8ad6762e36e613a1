from .session import ANONYMOUS_VIEWER


def viewer(request):
    return {'viewer': getattr(request, 'viewer', ANONYMOUS_VIEWER)}
