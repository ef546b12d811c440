# users/views.py
"""
USER + STAFF VIEWS

Public:
- register (always a VIEWER account)
- login (JWT access + refresh, plus the caller's capabilities)

Authenticated:
- me
- staff list + role assignment (users.manage capability, admins only)

Register and login share the anon throttle rate; everything else uses the
user rate.
"""

from __future__ import annotations

import logging

from django.contrib.auth import authenticate, get_user_model
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.filters import SearchFilter
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from permissions.roles import CAP_USERS_MANAGE, HasCapability

from .serializers import LoginSerializer, RegisterSerializer, StaffRoleSerializer, UserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


class RegisterView(generics.GenericAPIView):
    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AnonRateThrottle]

    @extend_schema(tags=["auth"])
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        return Response(
            {"message": "User registered successfully", "user": UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )


class LoginView(generics.GenericAPIView):
    serializer_class = LoginSerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AnonRateThrottle]

    @extend_schema(tags=["auth"])
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate(
            request=request,
            email=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
        )
        if not user:
            return Response(
                {"detail": "Invalid email or password"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        refresh = RefreshToken.for_user(user)
        return Response(
            {
                "access": str(refresh.access_token),
                "refresh": str(refresh),
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["auth"], responses={200: UserSerializer})
    def get(self, request):
        return Response(
            {"authenticated": True, "user": UserSerializer(request.user).data},
            status=status.HTTP_200_OK,
        )


# ---------------- STAFF ----------------
class StaffListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_USERS_MANAGE

    serializer_class = UserSerializer
    queryset = User.objects.all().order_by("email")
    filter_backends = [DjangoFilterBackend, SearchFilter]
    filterset_fields = ["role", "is_active"]
    search_fields = ["email", "username", "first_name", "last_name"]


class StaffRoleView(generics.UpdateAPIView):
    """PATCH /api/auth/staff/<id>/ {"role": "cashier"}"""

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_USERS_MANAGE
    http_method_names = ["patch", "options"]

    serializer_class = StaffRoleSerializer
    queryset = User.objects.all()

    @extend_schema(tags=["auth"], responses={200: UserSerializer})
    def patch(self, request, *args, **kwargs):
        user = self.get_object()
        previous_role = user.role

        serializer = self.get_serializer(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info(
            "Staff role updated",
            extra={
                "user_id": str(user.pk),
                "previous_role": previous_role,
                "role": user.role,
                "changed_by": str(request.user.pk),
            },
        )
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)
