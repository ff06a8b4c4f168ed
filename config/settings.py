"""
EastGate – Django Settings (Infrastructure Only)
=================================================
Django serves as the framework container for the EastGate core.
The core is the authority — Django does not dictate structure, and
nothing under core/ imports Django.

EASTGATE_* values are read by adapters/django_api/wiring.py and
injected into the core.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("EASTGATE_SECRET_KEY", "eastgate-dev-key-replace-before-deployment")

DEBUG = os.environ.get("EASTGATE_DEBUG", "1") == "1"

ALLOWED_HOSTS = [
    host for host in os.environ.get("EASTGATE_ALLOWED_HOSTS", "").split(",") if host
]

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    # ── EastGate Modules ──────────────────────────────────
    "core.bootstrap",
]

# ── Middleware ────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── Sessions ──────────────────────────────────────────────────
# The session is the cookie collaborator: it carries the signed
# {isAuthenticated, role, branchId, userId} principal and nothing else.
SESSION_ENGINE = "django.contrib.sessions.backends.signed_cookies"
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
SESSION_COOKIE_SECURE = not DEBUG
SESSION_COOKIE_AGE = 60 * 60 * 8

# ── URL & WSGI ────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

# ── Database ──────────────────────────────────────────────────
# Nothing is stored in the database; Django's own apps still expect one.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "Africa/Kigali"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── EastGate Core ─────────────────────────────────────────────
EASTGATE_BCRYPT_ROUNDS = int(os.environ.get("EASTGATE_BCRYPT_ROUNDS", "12"))
EASTGATE_ACTIVITY_LOG_CAPACITY = int(os.environ.get("EASTGATE_ACTIVITY_LOG_CAPACITY", "500"))
EASTGATE_LOGIN_MAX_ATTEMPTS = int(os.environ.get("EASTGATE_LOGIN_MAX_ATTEMPTS", "5"))
EASTGATE_LOGIN_WINDOW_SECONDS = int(os.environ.get("EASTGATE_LOGIN_WINDOW_SECONDS", "60"))
# Optional JSON state document; unset keeps everything in memory.
EASTGATE_STATE_PATH = os.environ.get("EASTGATE_STATE_PATH") or None

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "loggers": {
        "eastgate": {
            "handlers": ["console"],
            "level": os.environ.get("EASTGATE_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}
