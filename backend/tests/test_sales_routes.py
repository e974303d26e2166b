# Overview: Pytest coverage for the sales HTTP API (status codes and JSON shapes).

import pytest

from cafecito.services import catalog_service


def _body(*items, **extra):
    payload = {"items": [{"product_id": p, "quantity": q} for p, q in items]}
    payload.update(extra)
    return payload


class TestCreateSaleRoute:
    def test_created_with_ticket(self, client, make_product, make_customer, stock_of):
        pid = make_product(name="Cappuccino", price_cents=5000, stock=10)
        cid = make_customer(purchases_count=5)

        res = client.post("/api/sales/", json=_body((pid, 4), customer_id=cid, payment_method="card"))

        assert res.status_code == 201
        data = res.get_json()
        sale = data["sale"]
        assert sale["status"] == "completed"
        assert sale["subtotal_cents"] == 20000
        assert sale["discount_percent"] == 10
        assert sale["total_cents"] == 18000
        assert sale["items"][0]["product_name"] == "Cappuccino"

        ticket = data["ticket"]
        assert ticket["store_name"] == "Cafecito Feliz"
        assert ticket["sale_id"] == sale["sale_id"]
        assert ticket["subtotal"] == "200.00"
        assert ticket["discount"] == "10% (-$20.00)"
        assert ticket["total"] == "180.00"
        assert ticket["payment_method"] == "card"
        assert ticket["items"] == [
            {"name": "Cappuccino", "qty": 4, "unit_price": "50.00", "line_total": "200.00"},
        ]
        assert stock_of(pid) == 6

    def test_validation_lists_every_violation(self, client, db_session):
        res = client.post("/api/sales/", json={
            "payment_method": "bitcoin",
            "items": [{"product_id": "abc", "quantity": 0}],
        })

        assert res.status_code == 422
        data = res.get_json()
        assert data["error"] == "Validation failed"
        fields = {v["field"] for v in data["details"]}
        assert fields == {"payment_method", "items[0].product_id", "items[0].quantity"}

    def test_malformed_json(self, client, db_session):
        res = client.post("/api/sales/", data="{not json", content_type="application/json")

        assert res.status_code == 422
        assert res.get_json()["details"][0]["field"] == "items"

    def test_unknown_product(self, client, db_session):
        res = client.post("/api/sales/", json=_body((4242, 1)))

        assert res.status_code == 404
        assert res.get_json()["error"] == "Product not found"

    def test_unknown_customer(self, client, make_product):
        pid = make_product(stock=1)

        res = client.post("/api/sales/", json=_body((pid, 1), customer_id=999))

        assert res.status_code == 404
        assert res.get_json()["error"] == "Customer not found"

    def test_insufficient_stock(self, client, make_product, stock_of):
        a = make_product(name="Product A", stock=2)
        b = make_product(name="Product B", stock=2)

        res = client.post("/api/sales/", json=_body((a, 1), (b, 5)))

        assert res.status_code == 409
        data = res.get_json()
        assert data["error"] == "Insufficient stock"
        assert data["details"][0]["product_name"] == "Product B"
        assert data["details"][0]["requested"] == 5
        assert data["details"][0]["available"] == 2
        assert stock_of(a) == 2

    def test_oversized_quantity_is_rejected_before_any_stock_moves(self, client, make_product, stock_of):
        a = make_product(stock=5)
        b = make_product(stock=5)

        res = client.post("/api/sales/", json=_body((a, 1), (b, 10**20)))

        assert res.status_code == 422
        assert res.get_json()["details"][0]["field"] == "items[1].quantity"
        assert stock_of(a) == 5
        assert stock_of(b) == 5

    def test_oversized_product_id_is_rejected(self, client, db_session):
        res = client.post("/api/sales/", json=_body((10**20, 1)))

        assert res.status_code == 422
        assert res.get_json()["details"][0]["field"] == "items[0].product_id"

    def test_unexpected_error_mid_reservation_restores_stock(self, client, make_product, stock_of, monkeypatch):
        a = make_product(stock=5)
        b = make_product(stock=5)
        original = catalog_service.conditional_decrement

        def overflowing(product_id, quantity):
            if product_id == b:
                raise OverflowError("Python int too large to convert to SQLite INTEGER")
            return original(product_id, quantity)

        monkeypatch.setattr(catalog_service, "conditional_decrement", overflowing)

        res = client.post("/api/sales/", json=_body((a, 1), (b, 1)))

        assert res.status_code == 500
        assert res.get_json() == {"error": "Internal server error"}
        assert stock_of(a) == 5
        assert stock_of(b) == 5


class TestGetSaleRoute:
    def test_found(self, client, make_product):
        pid = make_product(stock=3)
        folio = client.post("/api/sales/", json=_body((pid, 1))).get_json()["sale"]["sale_id"]

        res = client.get(f"/api/sales/{folio}")

        assert res.status_code == 200
        assert res.get_json()["sale"]["sale_id"] == folio

    def test_not_found(self, client, db_session):
        res = client.get("/api/sales/CF-20000101-0000")

        assert res.status_code == 404
        assert res.get_json()["error"] == "Sale not found"


class TestCancelSaleRoute:
    def test_cancel_then_repeat(self, client, make_product, stock_of):
        pid = make_product(stock=5)
        folio = client.post("/api/sales/", json=_body((pid, 2))).get_json()["sale"]["sale_id"]

        res = client.patch(f"/api/sales/{folio}/cancel", json={"reason": "  wrong order  "})

        assert res.status_code == 200
        data = res.get_json()
        assert data["ok"] is True
        assert data["message"] == "Sale canceled and stock restored"
        assert data["restoration"] == "complete"
        assert "warnings" not in data
        assert data["sale"]["status"] == "canceled"
        assert data["sale"]["cancel_reason"] == "wrong order"
        assert stock_of(pid) == 5

        again = client.patch(f"/api/sales/{folio}/cancel", json={"reason": "again"})

        assert again.status_code == 409
        details = again.get_json()["details"]
        assert details["canceled_at"] == data["sale"]["canceled_at"]
        assert details["cancel_reason"] == "wrong order"
        assert stock_of(pid) == 5

    def test_cancel_without_body(self, client, make_product):
        pid = make_product(stock=5)
        folio = client.post("/api/sales/", json=_body((pid, 1))).get_json()["sale"]["sale_id"]

        res = client.patch(f"/api/sales/{folio}/cancel")

        assert res.status_code == 200
        assert res.get_json()["sale"]["cancel_reason"] == ""

    def test_reason_too_long(self, client, make_product):
        pid = make_product(stock=5)
        folio = client.post("/api/sales/", json=_body((pid, 1))).get_json()["sale"]["sale_id"]

        res = client.patch(f"/api/sales/{folio}/cancel", json={"reason": "x" * 256})

        assert res.status_code == 422
        assert client.get(f"/api/sales/{folio}").get_json()["sale"]["status"] == "completed"

    def test_partial_restoration_is_reported(self, client, make_product, monkeypatch):
        pid = make_product(stock=5)
        folio = client.post("/api/sales/", json=_body((pid, 2))).get_json()["sale"]["sale_id"]
        monkeypatch.setattr(catalog_service, "conditional_increment", lambda product_id, quantity: False)

        res = client.patch(f"/api/sales/{folio}/cancel")

        assert res.status_code == 200
        data = res.get_json()
        assert data["restoration"] == "partial"
        assert data["message"] == "Sale canceled; stock was only partially restored"
        assert len(data["warnings"]) == 1
        assert data["sale"]["status"] == "canceled"

    def test_cancel_unknown(self, client, db_session):
        res = client.patch("/api/sales/CF-20000101-0000/cancel")

        assert res.status_code == 404


class TestAppLevelResponses:
    def test_unknown_route_is_json(self, client):
        res = client.get("/api/nope")

        assert res.status_code == 404
        assert res.get_json() == {"error": "Not found"}

    def test_wrong_method_is_json(self, client):
        res = client.delete("/api/sales/")

        assert res.status_code == 405
        assert res.get_json() == {"error": "Method not allowed"}

    @pytest.mark.parametrize("origin,allowed", [
        ("http://localhost:4200", True),
        ("http://evil.example", False),
    ])
    def test_cors_only_for_front_app(self, client, origin, allowed):
        res = client.get("/api/version", headers={"Origin": origin})

        assert ("Access-Control-Allow-Origin" in res.headers) is allowed
