# ledger/conf.py

"""
CAPITAL LEDGER SETTINGS ACCESSORS

Reads settings.CAPITAL_LEDGER at call time (so override_settings works in tests)
and coerces every knob to its real type.

INITIAL_CAPITAL is the single source of truth for both:
- the bootstrap value of a never-seen ledger record, and
- the baseline the ledger collapses to when the last stock entry is deleted.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

TWOPLACES = Decimal("0.01")

DEFAULTS = {
    "INITIAL_CAPITAL": "200000.00",
    "WHOLESALE_PIECES_PER_PACKET": 20,
    "MAX_WRITE_RETRIES": 5,
    "TASK_MAX_ATTEMPTS": 3,
    "AUTO_PROCESS_TASKS": True,
}


def _raw(key: str):
    configured = getattr(settings, "CAPITAL_LEDGER", None) or {}
    return configured.get(key, DEFAULTS[key])


def _positive_int(key: str) -> int:
    try:
        value = int(_raw(key))
    except (TypeError, ValueError) as exc:
        raise ImproperlyConfigured(f"CAPITAL_LEDGER[{key!r}] must be an integer") from exc
    if value <= 0:
        raise ImproperlyConfigured(f"CAPITAL_LEDGER[{key!r}] must be greater than zero")
    return value


def initial_capital() -> Decimal:
    try:
        value = Decimal(str(_raw("INITIAL_CAPITAL"))).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as exc:
        raise ImproperlyConfigured("CAPITAL_LEDGER['INITIAL_CAPITAL'] must be a decimal amount") from exc
    if value < Decimal("0.00"):
        raise ImproperlyConfigured("CAPITAL_LEDGER['INITIAL_CAPITAL'] cannot be negative")
    return value


def wholesale_pieces_per_packet() -> int:
    return _positive_int("WHOLESALE_PIECES_PER_PACKET")


def max_write_retries() -> int:
    return _positive_int("MAX_WRITE_RETRIES")


def task_max_attempts() -> int:
    return _positive_int("TASK_MAX_ATTEMPTS")


def auto_process_tasks() -> bool:
    return bool(_raw("AUTO_PROCESS_TASKS"))
