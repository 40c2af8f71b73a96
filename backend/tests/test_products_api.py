from factories import get_location, get_product, make_stock


def test_requires_token(client):
    r = client.get("/api/products/by-code/SKU-0001")
    assert r.status_code == 401


def test_by_code_matches_sku_case_insensitively(client, auth_headers):
    r = client.get("/api/products/by-code/sku-0001", headers=auth_headers)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["sku"] == "SKU-0001"
    assert body["purchase_price"] == 4500
    assert body["selling_price"] == 6000


def test_by_code_matches_barcode(client, auth_headers):
    r = client.get("/api/products/by-code/8990000000028", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["sku"] == "SKU-0002"


def test_by_code_unknown_returns_404(client, auth_headers):
    r = client.get("/api/products/by-code/NOPE", headers=auth_headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Product not found"


def test_list_products_search_and_totals(client, db, auth_headers):
    product = get_product(db, "SKU-0002")
    make_stock(db, product, get_location(db, "A1"), 7)
    make_stock(db, product, get_location(db, "B1"), 5, batch_number="LOT-1")

    r = client.get("/api/products?search=stretch", headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["totalCount"] == 1
    assert data["products"][0]["sku"] == "SKU-0002"
    assert data["products"][0]["total_quantity_in_stock"] == 12


def test_create_product_rejects_duplicate_sku(client, auth_headers):
    payload = {"sku": "SKU123", "name": "Widget", "purchase_price": 10, "selling_price": 15}
    r = client.post("/api/products", json=payload, headers=auth_headers)
    assert r.status_code == 201, r.text
    assert r.json()["name"] == "Widget"

    r = client.post("/api/products", json=payload, headers=auth_headers)
    assert r.status_code == 409


def test_locations_report_volume_usage(client, db, auth_headers):
    make_stock(db, get_product(db, "SKU-0001"), get_location(db, "A1"), 100)

    r = client.get("/api/locations", headers=auth_headers)
    assert r.status_code == 200
    by_name = {row["name"]: row for row in r.json()}
    assert by_name["A1"]["current_volume_m3"] == 3.6
    assert by_name["B1"]["current_volume_m3"] == 0


def test_staff_cannot_create_location(client):
    r = client.post("/api/auth/login", json={"email": "staff@wms.local", "password": "Staff123!"})
    headers = {"Authorization": f"Bearer {r.json()['access_token']}"}

    r = client.post("/api/locations", json={"name": "C1", "max_capacity_m3": 10}, headers=headers)
    assert r.status_code == 403
