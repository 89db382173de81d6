"""
Goods receipt: stock increments per batch, explicit skips, header edits.
"""
from __future__ import annotations

from tests.conftest import API, batch_payload


def _line(product, batch, qty):
    return {
        "productId": product["id"],
        "productName": product["name"],
        "batchId": batch["id"],
        "quantity": qty,
        "price": 10,
        "amount": 10 * qty,
    }


def _stock_by_batch(client, product_id):
    body = client.get(f"{API}/products/{product_id}").json()
    return {b["batchNumber"]: b["stock"] for b in body["batches"]}


def test_purchase_increments_each_batch_by_quantity(client, make_product, make_supplier):
    supplier = make_supplier()
    p = make_product(batches=[batch_payload("A", stock=5), batch_payload("B", stock=1)])
    a, b = p["batches"]

    r = client.post(
        f"{API}/purchases",
        json={
            "supplierId": supplier["id"],
            "invoiceNumber": "INV-1",
            "items": [_line(p, a, 10), _line(p, b, 4)],
            "total": 140,
            "status": "credit",
            "paymentMethod": "upi",
        },
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["skippedItems"] == []
    assert len(body["items"]) == 2
    assert body["supplier"]["name"] == supplier["name"]
    assert _stock_by_batch(client, p["id"]) == {"A": 15, "B": 5}


def test_unknown_batch_is_skipped_and_purchase_still_saved(client, make_product, make_supplier, caplog):
    supplier = make_supplier()
    p = make_product(batches=[batch_payload("A", stock=5)])
    other = make_product(name="Other", batches=[batch_payload("Z", stock=0)])
    a = p["batches"][0]
    foreign = other["batches"][0]

    with caplog.at_level("WARNING", logger="medstore.services.recording"):
        r = client.post(
            f"{API}/purchases",
            json={
                "supplierId": supplier["id"],
                "items": [
                    _line(p, a, 3),
                    _line(p, {"id": 424242}, 7),
                    # batch exists, but belongs to another product
                    _line(p, foreign, 2),
                ],
                "total": 120,
                "status": "paid",
            },
        )
    assert r.status_code == 201, r.text
    assert r.json()["skippedItems"] == [1, 2]
    assert "Purchase stock update skipped" in caplog.text

    assert _stock_by_batch(client, p["id"]) == {"A": 8}
    assert _stock_by_batch(client, other["id"]) == {"Z": 0}

    listed = client.get(f"{API}/purchases").json()
    assert len(listed) == 1
    assert len(listed[0]["items"]) == 3


def test_purchase_requires_existing_supplier(client, make_product):
    p = make_product()
    r = client.post(
        f"{API}/purchases",
        json={
            "supplierId": 999,
            "items": [_line(p, p["batches"][0], 1)],
            "total": 10,
            "status": "paid",
        },
    )
    assert r.status_code == 404
    assert r.json()["message"] == "Supplier not found"


def test_purchase_validation(client, make_supplier):
    supplier = make_supplier()
    base = {"supplierId": supplier["id"], "total": 10, "status": "paid"}

    r = client.post(f"{API}/purchases", json={**base, "items": []})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "items"

    r = client.post(f"{API}/purchases", json={**base, "items": [], "status": "later"})
    assert r.status_code == 400

    r = client.post(f"{API}/purchases", json={**base, "total": -1, "items": []})
    assert r.status_code == 400


def test_get_and_update_purchase_header(client, make_product, make_supplier, make_purchase):
    supplier = make_supplier()
    p = make_product()
    purchase = make_purchase(supplier, p, status="credit")

    r = client.put(f"{API}/purchases/{purchase['id']}", json={"status": "paid", "notes": "settled"})
    assert r.status_code == 200
    assert r.json()["status"] == "paid"
    assert r.json()["notes"] == "settled"

    r = client.get(f"{API}/purchases/{purchase['id']}")
    assert r.status_code == 200
    assert r.json()["invoiceNumber"] == "INV-77"

    assert client.get(f"{API}/purchases/9999").status_code == 404


def test_update_purchase_rejects_null_status(client, make_product, make_supplier, make_purchase):
    purchase = make_purchase(make_supplier(), make_product(), status="credit")

    r = client.put(f"{API}/purchases/{purchase['id']}", json={"status": None})
    assert r.status_code == 400
    assert [e["field"] for e in r.json()["errors"]] == ["status"]
    assert client.get(f"{API}/purchases/{purchase['id']}").json()["status"] == "credit"
