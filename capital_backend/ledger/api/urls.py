# ledger/api/urls.py

from django.urls import path

from ledger.api.views import (
    LedgerRefreshView,
    LedgerSnapshotView,
    ReconciliationTaskListView,
    WithdrawalCancelView,
    WithdrawalConfirmView,
    WithdrawalListCreateView,
)

urlpatterns = [
    path("snapshot/", LedgerSnapshotView.as_view(), name="ledger-snapshot"),
    path("refresh/", LedgerRefreshView.as_view(), name="ledger-refresh"),
    path("withdrawals/", WithdrawalListCreateView.as_view(), name="ledger-withdrawals"),
    path(
        "withdrawals/<uuid:pk>/confirm/",
        WithdrawalConfirmView.as_view(),
        name="ledger-withdrawal-confirm",
    ),
    path(
        "withdrawals/<uuid:pk>/cancel/",
        WithdrawalCancelView.as_view(),
        name="ledger-withdrawal-cancel",
    ),
    path("tasks/", ReconciliationTaskListView.as_view(), name="ledger-tasks"),
]
