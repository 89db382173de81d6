# medstore/services/id_gen.py
from __future__ import annotations

import threading

from medstore.utils.timezone import epoch_millis

VOUCHER_PREFIX = "VCHR"
CREDIT_NOTE_PREFIX = "CN"
CUSTOMER_PREFIX = "CUST"

_lock = threading.Lock()
_last_stamp = 0


def _next_millis() -> int:
    """Epoch millis, strictly increasing within the process."""
    global _last_stamp
    with _lock:
        stamp = max(epoch_millis(), _last_stamp + 1)
        _last_stamp = stamp
        return stamp


def _stamp(prefix: str) -> str:
    return f"{prefix}-{_next_millis()}"


def new_voucher_id() -> str:
    return _stamp(VOUCHER_PREFIX)


def new_credit_note_id() -> str:
    return _stamp(CREDIT_NOTE_PREFIX)


def new_customer_code() -> str:
    return _stamp(CUSTOMER_PREFIX)
