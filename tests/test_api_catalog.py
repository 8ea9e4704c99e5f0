"""Products and employees endpoints."""


class TestProducts:
    def test_crud(self, client, admin_headers):
        created = client.post("/api/products", json={"productName": "Gauze pads"}, headers=admin_headers)
        assert created.status_code == 201
        product_id = created.json()["id"]

        assert client.get(f"/api/products/{product_id}", headers=admin_headers).json() == {
            "id": product_id,
            "productName": "Gauze pads",
        }

        renamed = client.put(f"/api/products/{product_id}", json={"productName": "Sterile gauze"}, headers=admin_headers)
        assert renamed.status_code == 200
        assert renamed.json()["productName"] == "Sterile gauze"

        names = [p["productName"] for p in client.get("/api/products", headers=admin_headers).json()]
        assert names == ["Sterile gauze"]

        assert client.delete(f"/api/products/{product_id}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/products/{product_id}", headers=admin_headers).status_code == 404

    def test_duplicate_name(self, client, admin_headers, make_product):
        make_product("Gauze pads")
        resp = client.post("/api/products", json={"productName": "Gauze pads"}, headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Product already exists"

    def test_manager_cannot_create(self, client, manager_headers):
        resp = client.post("/api/products", json={"productName": "Gauze pads"}, headers=manager_headers)
        assert resp.status_code == 403

    def test_delete_blocked_while_stock_exists(self, client, admin_headers, make_product, receive):
        product = make_product("Gauze pads")
        receive("Gauze pads", 5)

        resp = client.delete(f"/api/products/{product.id}", headers=admin_headers)

        assert resp.status_code == 409
        assert client.get(f"/api/products/{product.id}", headers=admin_headers).status_code == 200

    def test_delete_blocked_by_history_even_when_stock_is_gone(self, client, admin_headers, make_product, make_employee, receive, service):
        product = make_product("Gauze pads")
        make_employee()
        receive("Gauze pads", 5)
        service.record_outgoing("Gauze pads", 5, "Anna Kowalska", "600100200")

        resp = client.delete(f"/api/products/{product.id}", headers=admin_headers)
        assert resp.status_code == 409


class TestEmployees:
    payload = {"employeeName": "Anna Kowalska", "department": "surgery", "phoneNumber": "600100200"}

    def test_create_uppercases_department(self, client, admin_headers):
        resp = client.post("/api/employees", json=self.payload, headers=admin_headers)

        assert resp.status_code == 201
        assert resp.json()["department"] == "SURGERY"

    def test_name_and_phone_are_unique_together(self, client, admin_headers):
        client.post("/api/employees", json=self.payload, headers=admin_headers)

        dup = client.post("/api/employees", json=self.payload, headers=admin_headers)
        assert dup.status_code == 400

        other_phone = dict(self.payload, phoneNumber="600100201")
        assert client.post("/api/employees", json=other_phone, headers=admin_headers).status_code == 201

    def test_update_and_filter(self, client, admin_headers):
        employee_id = client.post("/api/employees", json=self.payload, headers=admin_headers).json()["id"]

        resp = client.put(f"/api/employees/{employee_id}", json={"department": "pharmacy"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["department"] == "PHARMACY"
        assert resp.json()["employeeName"] == "Anna Kowalska"

        listed = client.get("/api/employees", params={"department": "pharmacy"}, headers=admin_headers).json()
        assert [e["id"] for e in listed] == [employee_id]

    def test_delete(self, client, admin_headers):
        employee_id = client.post("/api/employees", json=self.payload, headers=admin_headers).json()["id"]

        assert client.delete(f"/api/employees/{employee_id}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/employees/{employee_id}", headers=admin_headers).status_code == 404

    def test_delete_blocked_by_outgoing_history(self, client, admin_headers, make_product, make_employee, receive, service):
        make_product("Gauze pads")
        employee = make_employee()
        receive("Gauze pads", 5)
        service.record_outgoing("Gauze pads", 2, "Anna Kowalska", "600100200")

        resp = client.delete(f"/api/employees/{employee.id}", headers=admin_headers)
        assert resp.status_code == 409
