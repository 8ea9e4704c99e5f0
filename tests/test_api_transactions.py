"""HTTP contract of /api/transactions and /api/stocks."""

import pytest


@pytest.fixture
def catalog(make_product, make_employee):
    make_product("Gauze pads")
    make_product("Syringe 5ml")
    make_employee("Anna Kowalska", "600100200")


def _incoming(client, headers, quantity=5, expiration="2024-01-01", product="Gauze pads"):
    return client.post(
        "/api/transactions/incoming",
        json={"productName": product, "quantity": quantity, "expirationDate": expiration},
        headers=headers,
    )


def _outgoing(client, headers, quantity, product="Gauze pads", name="Anna Kowalska", phone="600100200"):
    return client.post(
        "/api/transactions/outgoing",
        json={"productName": product, "quantity": quantity, "employeeName": name, "employeePhone": phone},
        headers=headers,
    )


class TestIncoming:
    def test_created(self, client, manager_headers, catalog):
        resp = _incoming(client, manager_headers, quantity=5, expiration="2024-01-01")

        assert resp.status_code == 201
        body = resp.json()
        assert body["productName"] == "Gauze pads"
        assert body["quantity"] == 5
        assert body["expirationDate"] == "2024-01-01"
        assert isinstance(body["id"], int)

    def test_expiry_is_normalized_to_utc_date(self, client, manager_headers, catalog):
        resp = _incoming(client, manager_headers, expiration="2024-03-01T23:30:00-05:00")

        assert resp.status_code == 201
        assert resp.json()["expirationDate"] == "2024-03-02"

    def test_unknown_product(self, client, manager_headers, catalog):
        resp = _incoming(client, manager_headers, product="Unobtainium")

        assert resp.status_code == 400
        assert resp.json()["message"] == "Product not found"

    @pytest.mark.parametrize("quantity", [0, -1, "5", 1.5])
    def test_invalid_quantity(self, client, manager_headers, catalog, quantity):
        assert _incoming(client, manager_headers, quantity=quantity).status_code == 422

    def test_malformed_date(self, client, manager_headers, catalog):
        assert _incoming(client, manager_headers, expiration="31/12/2024").status_code == 422

    def test_requires_token(self, client, catalog):
        resp = _incoming(client, {})
        assert resp.status_code == 401


class TestOutgoing:
    def test_fefo_over_http(self, client, admin_headers, catalog):
        _incoming(client, admin_headers, quantity=5, expiration="2024-02-01")
        _incoming(client, admin_headers, quantity=5, expiration="2024-01-01")

        resp = _outgoing(client, admin_headers, 7)

        assert resp.status_code == 201
        body = resp.json()
        assert body["quantity"] == 7
        assert body["employeeName"] == "Anna Kowalska"
        assert body["employeePhone"] == "600100200"

        stocks = client.get("/api/stocks", params={"productName": "Gauze pads"}, headers=admin_headers).json()
        assert [(s["quantity"], s["expirationDate"]) for s in stocks] == [(3, "2024-02-01")]

    def test_not_enough_stock(self, client, admin_headers, catalog):
        _incoming(client, admin_headers, quantity=10)

        resp = _outgoing(client, admin_headers, 100)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Not enough stock available"
        assert resp.json()["code"] == "INSUFFICIENT_STOCK"
        available = client.get("/api/stocks/available/Gauze pads", headers=admin_headers).json()
        assert available == {"productName": "Gauze pads", "quantity": 10}

    def test_no_batches_at_all(self, client, admin_headers, catalog):
        resp = _outgoing(client, admin_headers, 1, product="Syringe 5ml")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Not enough stock available"

    def test_unknown_product(self, client, admin_headers, catalog):
        resp = _outgoing(client, admin_headers, 1, product="Unobtainium")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Product not found"

    def test_unknown_employee(self, client, admin_headers, catalog):
        _incoming(client, admin_headers, quantity=10)
        resp = _outgoing(client, admin_headers, 1, phone="999")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Employee not found"


class TestReads:
    def test_list_and_get_transactions(self, client, manager_headers, catalog):
        first = _incoming(client, manager_headers, quantity=5).json()
        _incoming(client, manager_headers, quantity=3)
        out = _outgoing(client, manager_headers, 2).json()

        incoming = client.get("/api/transactions/incoming", headers=manager_headers).json()
        assert [t["quantity"] for t in incoming] == [5, 3]

        outgoing = client.get("/api/transactions/outgoing", headers=manager_headers).json()
        assert [t["id"] for t in outgoing] == [out["id"]]

        one = client.get(f"/api/transactions/incoming/{first['id']}", headers=manager_headers)
        assert one.status_code == 200
        assert one.json()["productName"] == "Gauze pads"

        assert client.get(f"/api/transactions/outgoing/{out['id']}", headers=manager_headers).status_code == 200

    def test_missing_transaction(self, client, manager_headers):
        resp = client.get("/api/transactions/incoming/999", headers=manager_headers)
        assert resp.status_code == 404
        assert resp.json()["message"] == "Transaction not found"

    def test_merged_receipts_show_one_batch(self, client, manager_headers, catalog):
        _incoming(client, manager_headers, quantity=5)
        _incoming(client, manager_headers, quantity=3)

        stocks = client.get("/api/stocks", headers=manager_headers).json()
        assert len(stocks) == 1
        assert stocks[0]["quantity"] == 8
        assert stocks[0]["productName"] == "Gauze pads"

        batch = client.get(f"/api/stocks/{stocks[0]['id']}", headers=manager_headers)
        assert batch.status_code == 200
        assert client.get("/api/stocks/999", headers=manager_headers).status_code == 404

    def test_available_for_unknown_product(self, client, manager_headers):
        resp = client.get("/api/stocks/available/Unobtainium", headers=manager_headers)
        assert resp.status_code == 404
