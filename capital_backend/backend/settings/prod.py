# backend/settings/prod.py
"""
PATH: backend/settings/prod.py

PRODUCTION SETTINGS

Fails closed on anything that would make the capital figures untrustworthy
or the API unsafe to expose:
- SECRET_KEY, ALLOWED_HOSTS, CORS / CSRF origins must be explicit
- Postgres only (the ledger relies on row locks and conditional updates)
- CAPITAL_LEDGER values are checked at startup, and the opening capital
  must be configured, not defaulted
- HTTPS everywhere behind the proxy, static files through WhiteNoise
"""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import BASE_DIR, CAPITAL_LEDGER, LOGGING, MIDDLEWARE, env

DEBUG = False


def _require(name: str, value):
    if not value:
        raise ImproperlyConfigured(f"{name} must be set in production.")
    return value


def _reject_local_or_plain_http(name: str, origins: list[str]) -> None:
    for origin in origins:
        if "localhost" in origin or "127.0.0.1" in origin:
            raise ImproperlyConfigured(f"Remove localhost from {name} in production.")
        if origin.startswith("http://"):
            raise ImproperlyConfigured(f"{name} must be https:// in production.")


# ----------------------------
# Secrets + hosts
# ----------------------------
SECRET_KEY = _require("SECRET_KEY", (env("SECRET_KEY", default="") or "").strip())
if SECRET_KEY == "dev-insecure-change-me":
    raise ImproperlyConfigured("SECRET_KEY must be set to a strong value in production.")

ALLOWED_HOSTS = _require("ALLOWED_HOSTS", env.list("ALLOWED_HOSTS", default=[]))

# ----------------------------
# Database (Postgres only)
# ----------------------------
_database_url = _require("DATABASE_URL", (env("DATABASE_URL", default="") or "").strip())
if not _database_url.startswith(("postgres://", "postgresql://", "pgsql://")):
    raise ImproperlyConfigured("DATABASE_URL must point at Postgres in production.")

DATABASES = {"default": env.db("DATABASE_URL")}
DATABASES["default"]["CONN_MAX_AGE"] = env.int("DB_CONN_MAX_AGE", default=60)

# ----------------------------
# Capital ledger
# ----------------------------
_require("LEDGER_INITIAL_CAPITAL", os.environ.get("LEDGER_INITIAL_CAPITAL", "").strip())

try:
    _opening_capital = Decimal(str(CAPITAL_LEDGER["INITIAL_CAPITAL"]))
except InvalidOperation as exc:
    raise ImproperlyConfigured("LEDGER_INITIAL_CAPITAL must be a number.") from exc
if not _opening_capital.is_finite() or _opening_capital < 0:
    raise ImproperlyConfigured("LEDGER_INITIAL_CAPITAL must be a non-negative amount.")

for _key in ("WHOLESALE_PIECES_PER_PACKET", "MAX_WRITE_RETRIES", "TASK_MAX_ATTEMPTS"):
    if int(CAPITAL_LEDGER[_key]) < 1:
        raise ImproperlyConfigured(f"CAPITAL_LEDGER[{_key!r}] must be at least 1.")

# Outbox task results stay visible whatever LOG_LEVEL is
LOGGING["loggers"]["ledger.services.hooks"] = {
    "handlers": ["console"],
    "level": "INFO",
    "propagate": False,
}

# ----------------------------
# Static files (WhiteNoise)
# ----------------------------
STATIC_ROOT = env("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))

MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# ----------------------------
# HTTPS behind the proxy
# ----------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)

SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=3600)
SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True)
SECURE_HSTS_PRELOAD = env.bool("SECURE_HSTS_PRELOAD", default=False)

SESSION_COOKIE_SECURE = CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = CSRF_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = CSRF_COOKIE_SAMESITE = "Lax"

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
SECURE_CROSS_ORIGIN_OPENER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"

# ----------------------------
# CORS / CSRF
# ----------------------------
CORS_ALLOWED_ORIGINS = _require(
    "CORS_ALLOWED_ORIGINS", env.list("CORS_ALLOWED_ORIGINS", default=[])
)
CSRF_TRUSTED_ORIGINS = _require(
    "CSRF_TRUSTED_ORIGINS", env.list("CSRF_TRUSTED_ORIGINS", default=[])
)
_reject_local_or_plain_http("CORS_ALLOWED_ORIGINS", CORS_ALLOWED_ORIGINS)
_reject_local_or_plain_http("CSRF_TRUSTED_ORIGINS", CSRF_TRUSTED_ORIGINS)

# Bearer tokens only; no cookies cross origins
CORS_ALLOW_CREDENTIALS = False
