"""
Registry utilities: audit logging.
"""


def get_client_ip(request):
    """Extract client IP from request."""
    if not request:
        return None
    xff = request.META.get('HTTP_X_FORWARDED_FOR')
    if xff:
        return xff.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def get_user_agent(request):
    """Extract User-Agent string (truncated for DB)."""
    if not request:
        return ''
    return (request.META.get('HTTP_USER_AGENT') or '')[:500]


def log_audit(request, action, object_type=None, object_id=None, extra=None, user=None):
    """
    Log a sensitive action for compliance.
    Call from views: log_audit(request, 'approve_registration', object_type='LandRegistration', object_id=reg.id)
    """
    from .models import AuditLog
    if user is None and request and getattr(request, 'user', None) and request.user.is_authenticated:
        user = request.user
    AuditLog.objects.create(
        user=user,
        action=action,
        object_type=object_type or '',
        object_id=object_id,
        extra=extra or {},
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
