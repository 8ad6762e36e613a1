"""
WSGI config for landregistry project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "landregistry.settings")

application = get_wsgi_application()
