"""
PROJECT URLS

All API routes live under /api/

Modules:
- /api/auth/       users (register / login / me / staff roles) + SimpleJWT token endpoints
- /api/inventory/  retail + wholesale stock, stock entry log, live valuation
- /api/sales/      customers + sale transactions
- /api/ledger/     capital management (snapshot, refresh, withdrawals, outbox)

Operational maturity:
- /api/health/ endpoint (AllowAny): DB connectivity + ledger outbox backlog.
- Django admin path configurable via ADMIN_PATH setting.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.db import DatabaseError
from django.db.models import Count
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from ledger.models import ReconciliationTask


# ------------------ API ROOT (PUBLIC) ------------------
@extend_schema(
    responses={
        200: {
            "type": "object",
            "properties": {
                "message": {"type": "string"},
                "auth": {"type": "object"},
                "docs": {"type": "object"},
                "modules": {"type": "object"},
            },
        }
    },
)
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return Response(
        {
            "message": "Capital Ledger Backend API is running",
            "auth": {
                "register": "/api/auth/register/",
                "login": "/api/auth/login/",
                "me": "/api/auth/me/",
                "staff": "/api/auth/staff/",
                "jwt_create": "/api/auth/jwt/create/",
                "jwt_refresh": "/api/auth/jwt/refresh/",
            },
            "docs": {
                "swagger": "/api/docs/",
                "schema": "/api/schema/",
            },
            "modules": {
                "inventory": "/api/inventory/",
                "sales": "/api/sales/",
                "ledger": "/api/ledger/",
            },
        }
    )


# ------------------ HEALTH CHECK (PUBLIC) ------------------
def _outbox_counts() -> dict:
    Status = ReconciliationTask.Status
    rows = (
        ReconciliationTask.objects.filter(status__in=[Status.PENDING, Status.FAILED])
        .order_by()
        .values_list("status")
        .annotate(total=Count("id"))
    )
    counts = dict(rows)
    return {
        "pending": counts.get(Status.PENDING, 0),
        "failed": counts.get(Status.FAILED, 0),
    }


@extend_schema(
    responses={
        200: {
            "type": "object",
            "properties": {
                "status": {"type": "string"},
                "db": {"type": "string"},
                "ledger_tasks": {"type": "object"},
            },
        },
        503: {
            "type": "object",
            "properties": {
                "status": {"type": "string"},
                "db": {"type": "string"},
                "error": {"type": "string"},
            },
        },
    },
)
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    - 503 when the database does not answer
    - "degraded" while ledger reconciliation tasks sit in FAILED
      (the capital figures lag inventory / sales until they are retried)
    """
    try:
        tasks = _outbox_counts()
    except DatabaseError as e:
        return Response(
            {"status": "down", "db": "down", "error": str(e)}, status=503
        )

    return Response(
        {
            "status": "degraded" if tasks["failed"] else "ok",
            "db": "ok",
            "ledger_tasks": tasks,
        }
    )


# ------------------ ADMIN PATH (HARDENED) ------------------
# In production, set ADMIN_PATH to something non-obvious. Keep trailing slash.
ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


# ------------------ API ROUTES (ALL UNDER /api/) ------------------
api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    # OpenAPI / Swagger
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # JWT (SimpleJWT)
    path("auth/jwt/create/", TokenObtainPairView.as_view(), name="jwt-create"),
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    # Auth & Users
    path("auth/", include("users.urls")),
    # App modules
    path("inventory/", include("inventory.urls")),
    path("sales/", include("sales.urls")),
    path("ledger/", include("ledger.api.urls")),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
