"""
Django settings for landregistry project.
Configured for development with structured logging.
"""

from pathlib import Path
import os
from dotenv import load_dotenv
load_dotenv()

# Authentication URLs
LOGIN_URL = '/auth/'
LOGIN_REDIRECT_URL = '/dashboard/'
LOGOUT_REDIRECT_URL = '/'

# =============================================================================
# BASE DIRECTORY
# =============================================================================

BASE_DIR = Path(__file__).resolve().parent.parent


# =============================================================================
# SECURITY SETTINGS
# =============================================================================

SECRET_KEY = os.environ.get(
    "DJANGO_SECRET_KEY",
    "django-insecure-3m!w9q$r0k2z%landregistry-dev-key#x7p@c4v8b1n6",
)

DEBUG = os.environ.get("DJANGO_DEBUG", "True").lower() in ("1", "true", "yes")

ALLOWED_HOSTS = [h.strip() for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",") if h.strip()]


# =============================================================================
# APPLICATION DEFINITION
# =============================================================================

INSTALLED_APPS = [
    "jazzmin",  # Admin interface enhancement
    # Django Core Apps
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Local Apps
    "registry",
]


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Attaches request.viewer (profile + role) after authentication
    "registry.middleware.ViewerSessionMiddleware",
]


# =============================================================================
# URL & WSGI CONFIG
# =============================================================================

ROOT_URLCONF = "landregistry.urls"
WSGI_APPLICATION = "landregistry.wsgi.application"


# =============================================================================
# TEMPLATE SETTINGS
# =============================================================================

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",

        # Global template directory
        "DIRS": [BASE_DIR / "templates"],

        "APP_DIRS": True,

        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
                "registry.context_processors.viewer",
            ],
        },
    },
]


# =============================================================================
# DATABASE CONFIGURATION
# =============================================================================

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}


# =============================================================================
# PASSWORD VALIDATION
# =============================================================================

# Sign-up only enforces a minimum length of 6 characters.
AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
        "OPTIONS": {"min_length": 6},
    },
]


# =============================================================================
# INTERNATIONALIZATION
# =============================================================================

LANGUAGE_CODE = "en-us"
TIME_ZONE = "Africa/Blantyre"

USE_I18N = True
USE_TZ = True


# =============================================================================
# STATIC FILES
# =============================================================================

STATIC_URL = "static/"

STATICFILES_DIRS = [
    BASE_DIR / "static",
]


# =============================================================================
# MEDIA FILES (Uploads)
# =============================================================================

MEDIA_URL = "/media/"
MEDIA_ROOT = BASE_DIR / "media"

# Registration documents (title deeds, survey plans) land here under MEDIA_ROOT
REGISTRATION_DOCUMENT_DIR = "registration_documents"


# =============================================================================
# DEFAULT PRIMARY KEY
# =============================================================================

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# =============================================================================
# CACHING
# =============================================================================

# Local memory cache; holds the map key fetched from MAP_KEY_ENDPOINT
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "landregistry",
    }
}


# =============================================================================
# MAP PROVIDERS
# =============================================================================

# One of: "maplibre" (vector tiles), "google" (JS SDK), "embed" (iframe)
MAP_PROVIDER = os.environ.get("MAP_PROVIDER", "maplibre")

MAP_PROVIDER_KEYS = {
    "maplibre": os.environ.get("MAPTILER_API_KEY", ""),
    "google": os.environ.get("GOOGLE_MAPS_API_KEY", ""),
}

# Optional function endpoint that returns {"key": "..."} for the JS SDK provider
MAP_KEY_ENDPOINT = os.environ.get("MAP_KEY_ENDPOINT", "")

# Lilongwe, national view
MAP_DEFAULT_CENTER = (-13.9626, 33.7741)
MAP_DEFAULT_ZOOM = 6
MAP_MAX_FIT_ZOOM = 12


# =============================================================================
# REALTIME (Server-Sent Events)
# =============================================================================

REALTIME_KEEPALIVE_SECONDS = float(os.environ.get("REALTIME_KEEPALIVE_SECONDS", "15"))
REALTIME_RETRY_MS = 3000


# =============================================================================
# ADMIN THEME
# =============================================================================

JAZZMIN_SETTINGS = {
    "site_title": "Land Registry Admin",
    "site_header": "Land Registry",
    "site_brand": "Land Registry",
    "welcome_sign": "Malawi Land Registration",
    "search_model": ["registry.LandRegistration", "registry.Land"],
    "icons": {
        "registry.Land": "fas fa-map-marked-alt",
        "registry.LandRegistration": "fas fa-file-signature",
        "registry.Profile": "fas fa-user",
        "registry.UserRole": "fas fa-user-shield",
        "registry.AuditLog": "fas fa-clipboard-list",
    },
}


# =============================================================================
# ENHANCED LOGGING CONFIGURATION
# =============================================================================

# Create logs directory automatically
LOG_DIR = BASE_DIR / "logs"
os.makedirs(LOG_DIR, exist_ok=True)

# Log file paths
ERROR_LOG_FILE = LOG_DIR / "error.log"
DEBUG_LOG_FILE = LOG_DIR / "debug.log"
DJANGO_LOG_FILE = LOG_DIR / "django.log"
REGISTRY_LOG_FILE = LOG_DIR / "registry.log"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,

    "formatters": {
        "verbose": {
            "format": "{levelname} | {asctime} | {name} | {module} | {lineno} | {message}",
            "style": "{",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "detailed": {
            "format": "{levelname} | {asctime} | {name} | {module} | {funcName} | {lineno} | {message}",
            "style": "{",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "simple": {
            "format": "{levelname} | {asctime} | {message}",
            "style": "{",
            "datefmt": "%H:%M:%S",
        },
    },

    "filters": {
        "require_debug_true": {
            "()": "django.utils.log.RequireDebugTrue",
        },
        "require_debug_false": {
            "()": "django.utils.log.RequireDebugFalse",
        },
    },

    "handlers": {
        # Console Handler - shows all logs in terminal
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
            "level": "DEBUG",
        },

        # Main Error Handler - captures all ERROR and above
        "error_file": {
            "class": "logging.FileHandler",
            "filename": ERROR_LOG_FILE,
            "formatter": "verbose",
            "level": "ERROR",
        },

        # Debug File Handler - captures DEBUG and above for detailed debugging
        "debug_file": {
            "class": "logging.FileHandler",
            "filename": DEBUG_LOG_FILE,
            "formatter": "detailed",
            "level": "DEBUG",
        },

        # Django-specific log file
        "django_file": {
            "class": "logging.FileHandler",
            "filename": DJANGO_LOG_FILE,
            "formatter": "verbose",
            "level": "INFO",
        },

        # Registry app specific log file
        "registry_file": {
            "class": "logging.FileHandler",
            "filename": REGISTRY_LOG_FILE,
            "formatter": "detailed",
            "level": "DEBUG",
        },
    },

    "loggers": {
        # Root logger - captures everything
        "": {
            "handlers": ["console", "error_file", "debug_file"],
            "level": "DEBUG",
            "propagate": True,
        },

        # Django Framework Logs
        "django": {
            "handlers": ["console", "django_file", "error_file"],
            "level": "INFO",
            "propagate": False,
        },

        # Django Request/Response logs (includes 4xx and 5xx errors)
        "django.request": {
            "handlers": ["error_file", "console"],
            "level": "ERROR",
            "propagate": False,
        },

        "django.server": {
            "handlers": ["error_file", "console"],
            "level": "ERROR",
            "propagate": False,
        },

        # Django DB logs (SQL queries when DEBUG=True)
        "django.db.backends": {
            "handlers": ["debug_file"],
            "level": "DEBUG" if DEBUG else "INFO",
            "propagate": False,
        },

        "django.security": {
            "handlers": ["error_file", "console"],
            "level": "ERROR",
            "propagate": False,
        },

        # Registry App - all logs from the app
        "registry": {
            "handlers": ["console", "registry_file", "error_file"],
            "level": "DEBUG",
            "propagate": False,
        },

        # Authentication logs
        "django.contrib.auth": {
            "handlers": ["console", "debug_file", "error_file"],
            "level": "INFO",
            "propagate": False,
        },

        # Third-party apps (set to WARNING to reduce noise)
        "jazzmin": {
            "handlers": ["error_file"],
            "level": "WARNING",
            "propagate": False,
        },

        "urllib3": {
            "handlers": ["error_file"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}
