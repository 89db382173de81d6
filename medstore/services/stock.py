# FILE: medstore/services/stock.py
"""
Batch-level stock arithmetic.

Everything here is pure: functions take anything shaped like a product
(``.batches``, ``.min_stock``) whose batches expose ``.stock``, ``.price``,
``.mrp`` and ``.expiry_date``. ORM rows, pydantic models and test doubles all
qualify. Stock state is derived, never stored, so list endpoints filter with
these helpers after the database query returns.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Iterator, List, Union

from medstore.core.config import settings

EXPIRED = "expired"

OUT_OF_STOCK = "out_of_stock"
LOW_STOCK = "low_stock"
IN_STOCK = "in_stock"

Horizon = Union[int, str]


def _batches(product: Any) -> List[Any]:
    return list(getattr(product, "batches", None) or [])


def total_stock(product: Any) -> int:
    return sum(int(b.stock or 0) for b in _batches(product))


def effective_min_stock(product: Any) -> int:
    return int(getattr(product, "min_stock", 0) or 0) or settings.DEFAULT_MIN_STOCK


def is_out_of_stock(product: Any) -> bool:
    return total_stock(product) == 0


def is_low_stock(product: Any) -> bool:
    """Zero stock is out-of-stock, never low-stock."""
    return 0 < total_stock(product) < effective_min_stock(product)


def stock_status(product: Any) -> str:
    if is_out_of_stock(product):
        return OUT_OF_STOCK
    if is_low_stock(product):
        return LOW_STOCK
    return IN_STOCK


def inventory_value(product: Any) -> float:
    return float(sum((b.stock or 0) * (b.price or 0) for b in _batches(product)))


def first_available_mrp(product: Any) -> float:
    for b in _batches(product):
        if (b.stock or 0) > 0:
            return float(b.mrp or 0)
    return 0.0


def matches_stock_status(product: Any, status: str | None) -> bool:
    if not status or status == "all":
        return True
    if status == OUT_OF_STOCK:
        return is_out_of_stock(product)
    if status == LOW_STOCK:
        return is_low_stock(product)
    return True


# ============================================================
# Expiry windows
# ============================================================
def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(as_of: date, expiry: date) -> int:
    return math.ceil((_as_date(expiry) - _as_date(as_of)).total_seconds() / 86400)


def parse_horizon(raw: Any) -> Horizon:
    """
    "expired" stays the sentinel, anything else must be a non-negative day count.
    Raises ValueError on garbage.
    """
    if isinstance(raw, str) and raw.strip().lower() == EXPIRED:
        return EXPIRED
    days = int(str(raw).strip())
    if days < 0:
        raise ValueError("Expiry horizon must be >= 0 days")
    return days


@dataclass(frozen=True)
class ExpiringBatch:
    product: Any
    batch: Any
    days_remaining: int


class ExpiringBatches:
    """
    Lazy view over one product's batches that fall in an expiry window.
    Iterating twice re-evaluates against the same product.
    """

    def __init__(self, product: Any, as_of: date, horizon: Horizon):
        self.product = product
        self.as_of = _as_date(as_of)
        self.horizon = horizon

    def _includes(self, expiry: date) -> bool:
        if self.horizon == EXPIRED:
            return expiry < self.as_of
        return 0 <= (expiry - self.as_of).days <= int(self.horizon)

    def __iter__(self) -> Iterator[ExpiringBatch]:
        for b in _batches(self.product):
            if (b.stock or 0) <= 0 or b.expiry_date is None:
                continue
            expiry = _as_date(b.expiry_date)
            if self._includes(expiry):
                yield ExpiringBatch(
                    product=self.product,
                    batch=b,
                    days_remaining=days_between(self.as_of, expiry),
                )


def expiring_batches(product: Any, as_of: date, horizon: Horizon) -> ExpiringBatches:
    return ExpiringBatches(product, as_of, horizon)


def collect_expiring(products: Iterable[Any], as_of: date, horizon: Horizon) -> List[ExpiringBatch]:
    rows: List[ExpiringBatch] = []
    for p in products:
        rows.extend(expiring_batches(p, as_of, horizon))
    rows.sort(key=lambda r: _as_date(r.batch.expiry_date))
    return rows
