"""
PATH: users/auth_backends.py

AUTH BACKEND: Email OR Username login

- An identifier containing "@" is looked up by email, anything else by username.
- Supplying both email= and username= explicitly is rejected (returns None).
- Inactive users never authenticate.

Used by the JWT login view and by SimpleJWT's TokenObtainPairView.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import BaseBackend

User = get_user_model()


class EmailOrUsernameBackend(BaseBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        email_kw = (kwargs.get("email") or "").strip()

        if email_kw and username:
            return None

        identifier = (email_kw or username or "").strip()
        if not identifier or password is None:
            return None

        lookup = {"email__iexact": identifier} if "@" in identifier else {"username__iexact": identifier}
        user = User.objects.filter(**lookup).first()

        if user is None or not user.is_active:
            return None

        return user if user.check_password(password) else None

    def get_user(self, user_id):
        return User.objects.filter(pk=user_id).first()
