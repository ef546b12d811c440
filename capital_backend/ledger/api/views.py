# ledger/api/views.py

"""
PATH: ledger/api/views.py

CAPITAL LEDGER API

GET  /api/ledger/snapshot/                    ledger.view
POST /api/ledger/refresh/                     ledger.manage
GET  /api/ledger/withdrawals/                 ledger.view      (summary: total + latest N)
POST /api/ledger/withdrawals/                 ledger.withdraw  (propose, optionally confirm)
POST /api/ledger/withdrawals/<id>/confirm/    ledger.withdraw
POST /api/ledger/withdrawals/<id>/cancel/     ledger.withdraw
GET  /api/ledger/tasks/                       ledger.manage    (outbox inspection)

Error mapping:
- validation  -> 400
- not found   -> 404
- state/race  -> 409
- storage     -> 503
"""

from __future__ import annotations

import logging

from django.db import transaction
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ledger.api.serializers import (
    CashWithdrawalCreateSerializer,
    CashWithdrawalSerializer,
    LedgerSnapshotSerializer,
    ReconciliationTaskSerializer,
    WithdrawalSummarySerializer,
)
from ledger.models import ReconciliationTask
from ledger.services.capital_ledger import CapitalLedger
from ledger.services.exceptions import (
    LedgerServiceError,
    LedgerWriteConflict,
    StorageUnavailableError,
    WithdrawalNotFoundError,
    WithdrawalStateError,
    WithdrawalValidationError,
)
from ledger.services.withdrawals import (
    cancel_withdrawal,
    confirm_withdrawal,
    get_withdrawal_summary,
    propose_withdrawal,
)
from permissions.roles import (
    CAP_LEDGER_MANAGE,
    CAP_LEDGER_VIEW,
    CAP_LEDGER_WITHDRAW,
    HasCapability,
)

logger = logging.getLogger(__name__)

_ERROR_STATUS = (
    (WithdrawalValidationError, status.HTTP_400_BAD_REQUEST),
    (WithdrawalNotFoundError, status.HTTP_404_NOT_FOUND),
    (WithdrawalStateError, status.HTTP_409_CONFLICT),
    (LedgerWriteConflict, status.HTTP_409_CONFLICT),
    (StorageUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def _error_response(exc: LedgerServiceError) -> Response:
    for exc_type, code in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            return Response({"detail": str(exc)}, status=code)
    logger.exception("Unhandled ledger error")
    return Response({"detail": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class LedgerSnapshotView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_VIEW

    @extend_schema(tags=["ledger"], responses={200: LedgerSnapshotSerializer})
    def get(self, request, *args, **kwargs):
        try:
            snapshot = CapitalLedger().get_snapshot()
        except LedgerServiceError as exc:
            return _error_response(exc)

        data = LedgerSnapshotSerializer(snapshot).data
        data["pending_tasks"] = ReconciliationTask.objects.filter(
            status=ReconciliationTask.Status.PENDING
        ).count()
        return Response(data, status=status.HTTP_200_OK)


class LedgerRefreshView(APIView):
    """Recompute the ledger against the live inventory valuation."""

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_MANAGE

    @extend_schema(tags=["ledger"], request=None, responses={200: LedgerSnapshotSerializer})
    def post(self, request, *args, **kwargs):
        try:
            snapshot = CapitalLedger().refresh()
        except LedgerServiceError as exc:
            return _error_response(exc)
        return Response(LedgerSnapshotSerializer(snapshot).data, status=status.HTTP_200_OK)


class WithdrawalListCreateView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]

    def get_permissions(self):
        self.required_capability = (
            CAP_LEDGER_WITHDRAW if self.request.method == "POST" else CAP_LEDGER_VIEW
        )
        return super().get_permissions()

    @extend_schema(
        tags=["ledger"],
        parameters=[
            OpenApiParameter(
                name="limit",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description="How many recent completed withdrawals to return (default 10).",
            )
        ],
        responses={200: WithdrawalSummarySerializer},
    )
    def get(self, request, *args, **kwargs):
        try:
            limit = int(request.query_params.get("limit", 10))
        except (TypeError, ValueError):
            return Response({"detail": "limit must be an integer"}, status=status.HTTP_400_BAD_REQUEST)

        summary = get_withdrawal_summary(limit=max(0, min(limit, 100)))
        return Response(WithdrawalSummarySerializer(summary).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["ledger"],
        request=CashWithdrawalCreateSerializer,
        responses={201: CashWithdrawalSerializer},
    )
    def post(self, request, *args, **kwargs):
        serializer = CashWithdrawalCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            with transaction.atomic():
                withdrawal = propose_withdrawal(
                    amount=data["amount"],
                    user=request.user,
                    notes=data.get("notes", ""),
                )
                if data.get("confirm"):
                    withdrawal = confirm_withdrawal(withdrawal_id=withdrawal.id, user=request.user)
        except LedgerServiceError as exc:
            return _error_response(exc)

        return Response(CashWithdrawalSerializer(withdrawal).data, status=status.HTTP_201_CREATED)


class WithdrawalConfirmView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_WITHDRAW

    @extend_schema(tags=["ledger"], request=None, responses={200: CashWithdrawalSerializer})
    def post(self, request, pk, *args, **kwargs):
        try:
            withdrawal = confirm_withdrawal(withdrawal_id=pk, user=request.user)
        except LedgerServiceError as exc:
            return _error_response(exc)
        return Response(CashWithdrawalSerializer(withdrawal).data, status=status.HTTP_200_OK)


class WithdrawalCancelView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_WITHDRAW

    @extend_schema(tags=["ledger"], request=None, responses={200: CashWithdrawalSerializer})
    def post(self, request, pk, *args, **kwargs):
        try:
            withdrawal = cancel_withdrawal(withdrawal_id=pk, user=request.user)
        except LedgerServiceError as exc:
            return _error_response(exc)
        return Response(CashWithdrawalSerializer(withdrawal).data, status=status.HTTP_200_OK)


@extend_schema(tags=["ledger"])
class ReconciliationTaskListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_MANAGE

    serializer_class = ReconciliationTaskSerializer
    queryset = ReconciliationTask.objects.all().order_by("-created_at", "-id")
    filterset_fields = ["status", "kind"]
