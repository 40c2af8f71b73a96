from datetime import date

from sqlalchemy import select

from factories import get_location, get_product, make_stock
from wms.models.inventory import InventoryTransaction, StockLevel


def test_specific_stock_defaults_to_zero(client, db, auth_headers):
    product = get_product(db, "SKU-0001")
    location = get_location(db, "A1")

    r = client.get(f"/api/stocks/specific/{product.id}/{location.id}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {"system_count": 0}


def test_specific_stock_sums_batches(client, db, auth_headers):
    product = get_product(db, "SKU-0001")
    location = get_location(db, "A1")
    make_stock(db, product, location, 30)
    make_stock(db, product, location, 20, batch_number="LOT-7")

    r = client.get(f"/api/stocks/specific/{product.id}/{location.id}", headers=auth_headers)
    assert r.json()["system_count"] == 50


def test_statuses_are_seeded(client, auth_headers):
    r = client.get("/api/stocks/statuses", headers=auth_headers)
    assert r.status_code == 200
    assert [row["name"] for row in r.json()] == ["Good", "Damaged", "Quarantine"]


def test_low_stock_excludes_empty_rows(client, db, auth_headers):
    location = get_location(db, "A1")
    make_stock(db, get_product(db, "SKU-0001"), location, 3)
    make_stock(db, get_product(db, "SKU-0002"), location, 0)

    r = client.get("/api/stocks/low-stock?threshold=5", headers=auth_headers)
    assert r.status_code == 200
    rows = r.json()
    assert [row["sku"] for row in rows] == ["SKU-0001"]
    assert rows[0]["quantity"] == 3


def test_batch_suggestions_follow_expiry(client, db, auth_headers):
    product = get_product(db, "SKU-0002")
    location = get_location(db, "B1")
    make_stock(db, product, location, 4)
    make_stock(db, product, location, 6, batch_number="LATE", expiry_date=date(2027, 6, 1))
    make_stock(db, product, location, 2, batch_number="EARLY", expiry_date=date(2027, 1, 1))

    r = client.get(
        f"/api/stocks/batches?product_id={product.id}&location_id={location.id}",
        headers=auth_headers,
    )
    assert [row["batch_number"] for row in r.json()] == ["EARLY", "LATE", None]


def test_opname_endpoint_adjusts_batchless_row(client, db, auth_headers):
    product = get_product(db, "SKU-0001")
    location = get_location(db, "A1")
    make_stock(db, product, location, 50)

    r = client.post(
        "/api/stocks/opname",
        json={
            "product_id": product.id,
            "location_id": location.id,
            "physical_count": 45,
            "system_count": 50,
            "notes": "damaged carton",
        },
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    assert r.json()["adjustment"] == -5

    db.expire_all()
    row = db.scalar(select(StockLevel).where(StockLevel.product_id == product.id))
    assert row.quantity == 45
    transaction = db.scalar(select(InventoryTransaction).order_by(InventoryTransaction.id.desc()))
    assert transaction.type == "OUT"
    assert transaction.items[0].quantity == 5
    assert "damaged carton" in transaction.notes


def test_opname_endpoint_without_difference_records_nothing(client, db, auth_headers):
    product = get_product(db, "SKU-0001")
    location = get_location(db, "A1")

    r = client.post(
        "/api/stocks/opname",
        json={"product_id": product.id, "location_id": location.id, "physical_count": 0, "system_count": 0},
        headers=auth_headers,
    )
    assert r.status_code == 200
    assert r.json()["adjustment"] == 0
    assert db.scalar(select(InventoryTransaction)) is None
