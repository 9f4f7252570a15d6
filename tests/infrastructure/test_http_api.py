"""End-to-end tests for the HTTP API over a temporary JSON data directory."""

import re

import pytest
from fastapi.testclient import TestClient

from shopledger.infrastructure.bootstrap import build_container
from shopledger.infrastructure.config import Settings
from shopledger.infrastructure.http.app import create_app

CODE = re.compile(r"[A-Z0-9]{3}(?:-[A-Z0-9]{3}){3}")


@pytest.fixture
def container(tmp_path):
    return build_container(Settings(data_dir=tmp_path, admin_secret="s3cret"))


@pytest.fixture
def client(container):
    return TestClient(create_app(container))


@pytest.fixture
def admin(client):
    response = client.post("/admin/sessions", json={"secret": "s3cret"})
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def tee(client, admin):
    response = client.post(
        "/products",
        json={"name": "Zen Tee", "price": "250.00", "stock": 3, "lowStockThreshold": 2},
        headers=admin,
    )
    assert response.status_code == 201
    return response.json()["id"]


def _order_body(product_id: str, quantity: int = 1, **extra) -> dict:
    return {
        "userEmail": "alice@example.com",
        "userName": "Alice",
        "items": [{"productId": product_id, "quantity": quantity, "size": "M"}],
        "shipping": 50,
        **extra,
    }


class TestAdminAuth:

    def test_wrong_secret(self, client):
        response = client.post("/admin/sessions", json={"secret": "nope"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid admin credentials"}

    def test_admin_routes_need_token(self, client):
        assert client.get("/orders").status_code == 401
        assert client.get("/orders", headers={"Authorization": "Bearer forged"}).status_code == 401


class TestOrdersApi:

    def test_place_and_track(self, client, tee, container):
        response = client.post("/orders", json=_order_body(tee, 2, total="550.00"))
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["orderNumber"] == "ZEN000001"
        assert body["total"] == "550.00"
        assert body["warnings"] == []
        assert container.products.get_by_id(tee).stock == 1

        tracked = client.get("/orders/track", params={
            "orderNumber": "#zen000001", "email": "ALICE@example.com",
        })
        assert tracked.status_code == 200
        order = tracked.json()["order"]
        assert order["statusLabel"] == "Order Placed"
        assert order["items"][0]["size"] == "M"

    def test_track_with_wrong_email_is_404(self, client, tee):
        client.post("/orders", json=_order_body(tee))
        response = client.get("/orders/track", params={
            "orderNumber": "ZEN000001", "email": "mallory@example.com",
        })
        assert response.status_code == 404
        assert response.json() == {"error": "Order not found"}

    def test_insufficient_stock_is_409(self, client, tee):
        response = client.post("/orders", json=_order_body(tee, 4))
        assert response.status_code == 409

    def test_missing_items_is_400(self, client):
        response = client.post("/orders", json={"userEmail": "alice@example.com"})
        assert response.status_code == 400
        assert "items" in response.json()["error"]

    def test_status_flow(self, client, tee, admin, container):
        order_id = client.post("/orders", json=_order_body(tee)).json()["id"]

        skipped = client.post(f"/orders/{order_id}/status", json={"status": "shipped"}, headers=admin)
        assert skipped.status_code == 400

        confirmed = client.post(f"/orders/{order_id}/status", json={"status": "confirmed"}, headers=admin)
        assert confirmed.status_code == 200
        assert confirmed.json()["notificationSent"] is True
        assert container.notifier.sent[-1].subject.startswith("Order #ZEN000001 update")

    def test_cancel_via_put_restocks(self, client, tee, admin, container):
        order_id = client.post("/orders", json=_order_body(tee, 2)).json()["id"]
        response = client.put("/orders", json={"id": order_id, "status": "cancelled", "notes": "changed mind"},
                              headers=admin)
        assert response.status_code == 200
        assert container.products.get_by_id(tee).stock == 3

        listed = client.get("/orders", headers=admin).json()["orders"]
        assert listed[0]["status"] == "cancelled"
        assert listed[0]["notes"] == "changed mind"

    def test_put_rejects_total(self, client, tee, admin):
        order_id = client.post("/orders", json=_order_body(tee)).json()["id"]
        response = client.put("/orders", json={"id": order_id, "total": "1"}, headers=admin)
        assert response.status_code == 400

    @pytest.mark.parametrize("body", [
        {"id": "abc", "notes": "x"},
        {"notes": "x"},
        {"id": 1, "userEmail": 42},
        {"id": 1, "status": ["cancelled"]},
    ])
    def test_malformed_update_is_400(self, client, tee, admin, body):
        client.post("/orders", json=_order_body(tee))
        response = client.put("/orders", json=body, headers=admin)
        assert response.status_code == 400
        assert "error" in response.json()

    def test_update_accepts_numeric_string_id(self, client, tee, admin, container):
        client.post("/orders", json=_order_body(tee))
        response = client.put("/orders", json={"id": "1", "userPhone": "01000000000"}, headers=admin)
        assert response.status_code == 200
        assert container.orders.get_by_id(1).contact.phone == "01000000000"

    def test_shipping_delivered_completes(self, client, tee, admin, container):
        order_id = client.post("/orders", json=_order_body(tee)).json()["id"]
        for status in ("confirmed", "processing", "shipped", "out_for_delivery"):
            client.post(f"/orders/{order_id}/status", json={"status": status}, headers=admin)

        response = client.post(
            "/notifications/shipping",
            json={"orderId": order_id, "status": "delivered"},
            headers=admin,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert container.orders.get_by_id(order_id).shipping_status == "delivered"


class TestCouponsApi:

    def test_save10_scenario(self, client, admin):
        created = client.post(
            "/coupons",
            json={"code": "save10", "type": "percentage", "value": 10, "minOrderAmount": 100, "maxUses": 1},
            headers=admin,
        )
        assert created.status_code == 201

        check = client.get("/coupons", params={"code": "SAVE10", "orderAmount": "200"}).json()
        assert check["valid"] is True
        assert check["discount"] == "20.00"

        used = client.put("/coupons", json={"action": "use", "code": "SAVE10"})
        assert used.json() == {"success": True, "usedCount": 1}

        again = client.get("/coupons", params={"code": "SAVE10", "orderAmount": "200"}).json()
        assert again["valid"] is False
        assert "usage limit" in again["error"]

        exhausted = client.put("/coupons", json={"action": "use", "code": "SAVE10"})
        assert exhausted.status_code == 409

    def test_duplicate_code_is_409(self, client, admin):
        body = {"code": "A", "type": "fixed", "value": 50}
        client.post("/coupons", json=body, headers=admin)
        assert client.post("/coupons", json=body, headers=admin).status_code == 409

    def test_listing_needs_admin(self, client, admin):
        assert client.get("/coupons").status_code == 401
        assert client.get("/coupons", headers=admin).json() == {"coupons": []}

    def test_deactivate(self, client, admin):
        coupon_id = client.post(
            "/coupons", json={"code": "A", "type": "fixed", "value": 50}, headers=admin,
        ).json()["id"]
        response = client.put("/coupons", json={"id": coupon_id, "isActive": False}, headers=admin)
        assert response.json()["coupon"]["isActive"] is False

    @pytest.mark.parametrize("edit", [
        {"maxUses": "lots"},
        {"expiresAt": "next week"},
        {"isActive": "maybe"},
        {"usedCount": 0},
    ])
    def test_malformed_edit_is_400(self, client, admin, edit):
        coupon_id = client.post(
            "/coupons", json={"code": "A", "type": "fixed", "value": 50}, headers=admin,
        ).json()["id"]
        response = client.put("/coupons", json={"id": coupon_id, **edit}, headers=admin)
        assert response.status_code == 400
        assert "error" in response.json()

    def test_edit_expiry(self, client, admin):
        coupon_id = client.post(
            "/coupons", json={"code": "A", "type": "fixed", "value": 50}, headers=admin,
        ).json()["id"]
        response = client.put(
            "/coupons", json={"id": coupon_id, "expiresAt": "2030-01-01T00:00:00", "maxUses": "5"},
            headers=admin,
        )
        coupon = response.json()["coupon"]
        assert coupon["expiresAt"].startswith("2030-01-01T00:00:00")
        assert coupon["maxUses"] == 5


class TestReviewsApi:

    def test_submit_list_and_vote(self, client, tee, container):
        response = client.post("/reviews", json={"productId": tee, "userId": "u1", "rating": 4})
        assert response.status_code == 201
        review_id = response.json()["id"]

        duplicate = client.post("/reviews", json={"productId": tee, "userId": "u1", "rating": 5})
        assert duplicate.status_code == 409

        listed = client.get("/reviews", params={"productId": tee}).json()
        assert listed["totalReviews"] == 1
        assert listed["averageRating"] == "4.0"

        voted = client.put("/reviews", json={"reviewId": review_id, "action": "helpful"})
        assert voted.json() == {"success": True, "helpful": 1}
        assert container.products.get_by_id(tee).review_count == 1

    def test_bad_rating_is_400(self, client, tee):
        response = client.post("/reviews", json={"productId": tee, "userId": "u1", "rating": 9})
        assert response.status_code == 400


class TestInventoryApi:

    def test_low_stock_alert(self, client, tee, admin, container):
        client.post("/orders", json=_order_body(tee, 2))

        response = client.post("/notifications/inventory", json={}, headers=admin)
        body = response.json()
        assert [p["productId"] for p in body["products"]] == [tee]
        assert body["products"][0]["threshold"] == 2

        alerts = client.get("/notifications/inventory", headers=admin).json()["alerts"]
        assert len(alerts) == 1
        assert container.notifier.sent[-1].subject == "Low inventory alert: 1 products"

    def test_nothing_low(self, client, tee, admin):
        body = client.post("/notifications/inventory", json={"threshold": 0}, headers=admin).json()
        assert body["products"] == []
        assert body["message"] == "No low stock products found"


class TestWishlistAndTwoFactor:

    def test_wishlist(self, client, tee):
        assert client.post("/wishlist", json={"userId": "u1", "productId": tee}).json()["added"] is True
        items = client.get("/wishlist", params={"userId": "u1"}).json()["items"]
        assert items[0]["name"] == "Zen Tee"
        removed = client.delete("/wishlist", params={"userId": "u1", "productId": tee})
        assert removed.json()["removed"] is True

    def test_two_factor(self, client, container):
        sent = client.post("/auth/2fa/send", json={"email": "alice@example.com", "userId": "u1"})
        assert sent.status_code == 200
        code = CODE.search(container.notifier.sent[-1].text).group(0)

        wrong = client.post("/auth/2fa/verify", json={"userId": "u1", "code": "AAA-AAA-AAA-AAA"})
        assert wrong.status_code == 400
        assert client.post("/auth/2fa/verify", json={"userId": "u1", "code": code}).status_code == 200
        assert client.post("/auth/2fa/verify", json={"userId": "u1", "code": code}).status_code == 400
