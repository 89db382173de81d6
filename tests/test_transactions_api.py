"""
Sales ledger: recording, listing backfill, composite filter, analytics.
"""
from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import update

from medstore.models.ledger import PaymentStatus, Transaction, TransactionType
from medstore.utils.timezone import now_local
from tests.conftest import API, batch_payload, sale_payload


def _record(client, product, **extra):
    r = client.post(f"{API}/transactions", json=sale_payload(product, **extra))
    assert r.status_code == 201, r.text
    return r.json()


def _backdate(db, txn_id, when: datetime):
    db.execute(update(Transaction).where(Transaction.id == txn_id).values(created_at=when))
    db.commit()


def _ids(client, **params):
    r = client.get(f"{API}/transactions/filter", params=params)
    assert r.status_code == 200, r.text
    return sorted(t["id"] for t in r.json())


def test_create_sale_does_not_touch_stock(client, make_product):
    p = make_product(batches=[batch_payload(stock=10)])
    txn = _record(client, p)
    assert txn["type"] == "sale"
    assert txn["items"][0]["quantity"] == 2
    assert client.get(f"{API}/products/{p['id']}").json()["totalStock"] == 10


def test_create_transaction_validation(client, make_product, make_supplier):
    p = make_product()
    supplier = make_supplier()

    r = client.post(f"{API}/transactions", json=sale_payload(p, items=[]))
    assert r.status_code == 400

    r = client.post(f"{API}/transactions", json=sale_payload(p, total=-5))
    assert r.status_code == 400

    r = client.post(f"{API}/transactions", json=sale_payload(p, paymentMethod="Cheque"))
    assert r.status_code == 400

    # counterparty must match the type
    r = client.post(f"{API}/transactions", json=sale_payload(p, supplierId=supplier["id"]))
    assert r.status_code == 400


def test_listing_backfills_missing_type(client, db, make_product):
    p = make_product()
    txn = _record(client, p)
    db.execute(update(Transaction).where(Transaction.id == txn["id"]).values(type=None))
    db.commit()

    listed = client.get(f"{API}/transactions").json()
    assert listed[0]["type"] == "sale"
    db.expire_all()
    assert db.get(Transaction, txn["id"]).type.value == "sale"


def test_get_and_update_transaction(client, make_product):
    p = make_product()
    txn = _record(client, p, status="credit")

    r = client.put(f"{API}/transactions/{txn['id']}", json={"status": "paid", "paymentMethod": "UPI"})
    assert r.status_code == 200
    assert r.json()["status"] == "paid"
    assert r.json()["paymentMethod"] == "UPI"

    assert client.get(f"{API}/transactions/{txn['id']}").json()["status"] == "paid"
    assert client.get(f"{API}/transactions/4040").status_code == 404


def test_filter_by_type_status_and_payment_group(client, make_product):
    p = make_product()
    cash = _record(client, p, paymentMethod="Cash")
    upi_credit = _record(client, p, paymentMethod="UPI", status="credit")
    card = _record(client, p, paymentMethod="Card")
    purchase = _record(client, p, type="purchase", customerName=None, supplierName="Sri Devi", paymentMethod="Bank")

    assert _ids(client, type="purchase") == [purchase["id"]]
    assert _ids(client, type="all") == sorted([cash["id"], upi_credit["id"], card["id"], purchase["id"]])
    assert _ids(client, status="credit") == [upi_credit["id"]]
    assert _ids(client, paymentMethods=["Card", "Credit"]) == sorted([card["id"], upi_credit["id"]])
    assert _ids(client, paymentMethods=["cash"]) == [cash["id"]]

    assert client.get(f"{API}/transactions/filter", params={"type": "refund"}).status_code == 400


def test_filter_by_product_and_party_search(client, make_product):
    dolo = make_product(name="Dolo 650")
    cetzine = make_product(name="Cetzine")
    a = _record(client, dolo, customerName="Ramesh Kumar")
    b = _record(client, cetzine, customerName="Lakshmi")

    assert _ids(client, productSearch="dolo") == [a["id"]]
    # shorter than three characters: ignored
    assert _ids(client, productSearch="do") == sorted([a["id"], b["id"]])
    assert _ids(client, partySearch="laks") == [b["id"]]


def test_filter_by_schedule_resolves_through_products(client, make_product):
    h1 = make_product(name="Alprazolam", schedule="H1")
    otc = make_product(name="ORS")
    hit = _record(client, h1)
    _record(client, otc)

    assert _ids(client, schedules=["H1"]) == [hit["id"]]
    assert _ids(client, schedules=["narcotic"]) == []
    assert client.get(f"{API}/transactions/filter", params={"schedules": "Z9"}).status_code == 400


def test_filter_by_period_and_explicit_range(client, db, make_product):
    p = make_product()
    now = now_local()
    recent = _record(client, p)
    old = _record(client, p)
    _backdate(db, old["id"], now - timedelta(days=40))

    assert _ids(client, period="today") == [recent["id"]]
    assert _ids(client, period="week") == [recent["id"]]

    start = (now - timedelta(days=45)).date().isoformat()
    end = (now - timedelta(days=35)).date().isoformat()
    # explicit range wins over period
    assert _ids(client, startDate=start, endDate=end, period="today") == [old["id"]]

    r = client.get(f"{API}/transactions/filter", params={"startDate": "yesterday", "endDate": end})
    assert r.status_code == 400


def test_stats_and_analytics_summary(client, db, make_product):
    p = make_product()
    _record(client, p, total=100)
    _record(client, p, total=50, type="purchase", customerName=None, supplierName="Sri Devi")
    old = _record(client, p, total=25)
    _backdate(db, old["id"], now_local() - timedelta(days=400))

    stats = client.get(f"{API}/transactions/stats").json()
    assert stats == {"totalTransactions": 3, "totalSales": 175.0, "totalPurchases": 1}

    summary = client.get(f"{API}/transactions/analytics/summary").json()
    assert summary["dailySales"] == {"total": 150.0, "count": 2}
    assert summary["monthlySales"] == {"total": 150.0, "count": 2}
    assert summary["totalTransactions"] == 3


def test_chart_buckets_by_range(client, db, make_product):
    p = make_product()
    now = now_local()
    _record(client, p, total=100)
    _record(client, p, total=40, type="purchase", customerName=None, supplierName="Sri Devi")
    old = _record(client, p, total=10)
    _backdate(db, old["id"], now - timedelta(days=60))

    day = client.get(f"{API}/transactions/chart/day").json()
    assert [pt["period"] for pt in day] == [now.strftime("%Y-%m-%d")]
    assert day[0]["sales"] == 100.0
    assert day[0]["purchases"] == 40.0

    iso = now.isocalendar()
    week = client.get(f"{API}/transactions/chart/week").json()
    assert week[-1]["period"] == f"{iso[0]}-W{iso[1]:02d}"
    assert sum(pt["sales"] for pt in week) == 110.0

    month = client.get(f"{API}/transactions/chart/month").json()
    periods = [pt["period"] for pt in month]
    assert periods == sorted(periods)
    assert periods[-1] == now.strftime("%Y-%m")
    assert sum(pt["sales"] for pt in month) == 110.0

    # unknown ranges fall back to monthly buckets
    assert client.get(f"{API}/transactions/chart/decade").json() == month


def test_update_transaction_rejects_null_status(client, make_product):
    txn = _record(client, make_product())
    r = client.put(f"{API}/transactions/{txn['id']}", json={"status": None})
    assert r.status_code == 400
    assert [e["field"] for e in r.json()["errors"]] == ["status"]


def test_filter_caps_at_one_hundred_newest_first(client, db):
    base = now_local() - timedelta(hours=5)
    db.add_all(
        Transaction(type=TransactionType.SALE, status=PaymentStatus.PAID, total=10, created_at=base + timedelta(minutes=i))
        for i in range(101)
    )
    db.commit()

    r = client.get(f"{API}/transactions/filter")
    assert r.status_code == 200
    rows = r.json()
    assert len(rows) == 100
    stamps = [t["createdAt"] for t in rows]
    assert stamps == sorted(stamps, reverse=True)
    oldest = db.query(Transaction).order_by(Transaction.created_at.asc()).first()
    assert oldest.id not in {t["id"] for t in rows}
