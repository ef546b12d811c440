# users/admin.py

"""
USERS ADMIN

Self-registration only creates VIEWER accounts. Staff are promoted here (or
through PATCH /api/auth/staff/<id>/): pick users, run a "Set role" action.
The capability column shows what the current role actually unlocks.
"""

from __future__ import annotations

from django.contrib import admin, messages
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from permissions.roles import effective_capabilities_for

User = get_user_model()

try:
    admin.site.unregister(User)
except admin.sites.NotRegistered:
    pass


def _set_role_action(role: str, label: str):
    def action(modeladmin, request, queryset):
        updated = queryset.exclude(pk=request.user.pk).update(role=role)
        modeladmin.message_user(request, f"{updated} user(s) set to {label}.", messages.SUCCESS)

    action.__name__ = f"set_role_{role}"
    action.short_description = f"Set role: {label}"
    return action


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    ordering = ("email",)
    list_display = ("email", "username", "role", "capability_summary", "is_active")
    list_filter = ("role", "is_active", "is_superuser")
    search_fields = ("email", "username", "first_name", "last_name")
    readonly_fields = ("capability_summary", "created_at", "updated_at")

    actions = [_set_role_action(role, label) for role, label in User.ROLE_CHOICES]

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("username", "first_name", "last_name")}),
        ("Role", {"fields": ("role", "capability_summary")}),
        ("Django access", {"fields": ("is_active", "is_staff", "is_superuser")}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "password1", "password2", "role", "is_active"),
            },
        ),
    )

    @admin.display(description="Capabilities")
    def capability_summary(self, obj):
        return ", ".join(sorted(effective_capabilities_for(obj))) or "-"
