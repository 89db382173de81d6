"""
Batch aggregation and expiry windows, exercised on plain objects.
"""
from __future__ import annotations

from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from medstore.services import stock as stock_svc

AS_OF = date(2025, 3, 1)


def _batch(stock=10, price=5.0, mrp=8.0, days=30, number="B"):
    return SimpleNamespace(
        batch_number=number,
        stock=stock,
        price=price,
        mrp=mrp,
        expiry_date=AS_OF + timedelta(days=days),
    )


def _product(*batches, min_stock=0, name="Cetirizine"):
    return SimpleNamespace(name=name, min_stock=min_stock, batches=list(batches))


# ---------- classification ----------
def test_total_stock_sums_batches():
    p = _product(_batch(stock=3), _batch(stock=4), _batch(stock=0))
    assert stock_svc.total_stock(p) == 7


def test_min_stock_defaults_to_twenty_when_unset_or_zero():
    assert stock_svc.effective_min_stock(_product(min_stock=0)) == 20
    assert stock_svc.effective_min_stock(_product(min_stock=None)) == 20
    assert stock_svc.effective_min_stock(_product(min_stock=7)) == 7


def test_zero_stock_is_out_of_stock_not_low():
    p = _product(_batch(stock=0))
    assert stock_svc.is_out_of_stock(p)
    assert not stock_svc.is_low_stock(p)
    assert stock_svc.stock_status(p) == stock_svc.OUT_OF_STOCK


def test_product_without_batches_is_out_of_stock():
    p = _product()
    assert stock_svc.stock_status(p) == stock_svc.OUT_OF_STOCK


@pytest.mark.parametrize(
    "stock,min_stock,expected",
    [
        (5, 10, stock_svc.LOW_STOCK),
        (10, 10, stock_svc.IN_STOCK),
        (19, 0, stock_svc.LOW_STOCK),
        (20, 0, stock_svc.IN_STOCK),
    ],
)
def test_stock_status_thresholds(stock, min_stock, expected):
    p = _product(_batch(stock=stock), min_stock=min_stock)
    assert stock_svc.stock_status(p) == expected


def test_inventory_value_is_stock_times_purchase_price():
    p = _product(_batch(stock=4, price=2.5), _batch(stock=2, price=10))
    assert stock_svc.inventory_value(p) == pytest.approx(30.0)


def test_first_available_mrp_skips_empty_batches():
    p = _product(_batch(stock=0, mrp=99), _batch(stock=3, mrp=42))
    assert stock_svc.first_available_mrp(p) == 42
    assert stock_svc.first_available_mrp(_product(_batch(stock=0))) == 0


def test_matches_stock_status_filter():
    low = _product(_batch(stock=2))
    empty = _product(_batch(stock=0))
    assert stock_svc.matches_stock_status(low, "low_stock")
    assert not stock_svc.matches_stock_status(empty, "low_stock")
    assert stock_svc.matches_stock_status(empty, "out_of_stock")
    assert stock_svc.matches_stock_status(empty, "all")
    assert stock_svc.matches_stock_status(empty, None)


# ---------- expiry windows ----------
def test_window_mode_bounds_are_inclusive_and_skip_empty_batches():
    p = _product(
        _batch(days=0, number="today"),
        _batch(days=30, number="edge"),
        _batch(days=31, number="outside"),
        _batch(days=-1, number="expired"),
        _batch(days=5, stock=0, number="empty"),
    )
    got = [r.batch.batch_number for r in stock_svc.expiring_batches(p, AS_OF, 30)]
    assert got == ["today", "edge"]


def test_expired_mode_only_returns_past_expiry():
    p = _product(
        _batch(days=-10, number="old"),
        _batch(days=0, number="today"),
        _batch(days=-3, stock=0, number="gone"),
    )
    rows = list(stock_svc.expiring_batches(p, AS_OF, stock_svc.EXPIRED))
    assert [r.batch.batch_number for r in rows] == ["old"]
    assert rows[0].days_remaining == -10


def test_expiring_view_is_restartable():
    p = _product(_batch(days=3), _batch(days=9))
    view = stock_svc.expiring_batches(p, AS_OF, 15)
    assert len(list(view)) == 2
    assert len(list(view)) == 2


def test_days_remaining_rounds_up():
    assert stock_svc.days_between(AS_OF, AS_OF + timedelta(days=10)) == 10
    assert stock_svc.days_between(AS_OF, AS_OF) == 0


def test_collect_expiring_sorts_by_expiry_across_products():
    a = _product(_batch(days=20, number="a20"), name="A")
    b = _product(_batch(days=5, number="b5"), _batch(days=12, number="b12"), name="B")
    rows = stock_svc.collect_expiring([a, b], AS_OF, 30)
    assert [r.batch.batch_number for r in rows] == ["b5", "b12", "a20"]
    assert rows[0].product.name == "B"


@pytest.mark.parametrize("raw,expected", [("expired", "expired"), ("EXPIRED", "expired"), ("15", 15), (60, 60)])
def test_parse_horizon_accepts_sentinel_and_day_counts(raw, expected):
    assert stock_svc.parse_horizon(raw) == expected


@pytest.mark.parametrize("raw", ["soon", "-5", ""])
def test_parse_horizon_rejects_garbage(raw):
    with pytest.raises(ValueError):
        stock_svc.parse_horizon(raw)
