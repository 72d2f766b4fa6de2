"""Tests for the FastAPI routers."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from novara.api import create_app
from novara.api import deps
from novara.data.database import get_db
from novara.domain.errors import ApiError
from novara.services.cart_service import CartOwner
from novara.services.dashboard_service import DashboardService

CHECKOUT_FORM = {
    "customer_name": "Asha Rao",
    "email": "asha@example.com",
    "phone": "9876543210",
    "address": "12 MG Road",
    "city": "Pune",
    "state": "MH",
    "zip_code": "411001",
    "country": "IN",
}


@pytest.fixture
def app(engine, client, user_owner, widget):
    app = create_app()
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    def override_db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[deps.get_client] = lambda: client
    app.dependency_overrides[deps.get_owner] = lambda: user_owner
    app.dependency_overrides[deps.get_widget] = lambda: widget
    return app


@pytest.fixture
def api(app):
    return TestClient(app)


class TestHealthCheck:
    def test_health(self, api):
        response = api.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestCatalog:
    def test_all_category_means_no_filter(self, api, client):
        client.products.get_all.return_value = {"products": [{"_id": "p1"}]}
        response = api.get("/products", params={"category": "all"})
        assert response.status_code == 200
        client.products.get_all.assert_called_once_with(category=None, search=None)

    def test_category_and_search(self, api, client):
        client.products.get_all.return_value = {"products": []}
        api.get("/products", params={"category": "rings", "search": "gold"})
        client.products.get_all.assert_called_once_with(category="rings", search="gold")

    def test_trending_is_not_a_product_id(self, api, client):
        client.products.trending.return_value = {"products": [{"_id": "p7"}]}
        assert api.get("/products/trending").json() == {"products": [{"_id": "p7"}]}
        client.products.get_by_id.assert_not_called()

    def test_unknown_product(self, api, client):
        client.products.get_by_id.side_effect = ApiError("Product not found", status_code=404)
        assert api.get("/products/nope").status_code == 404

    def test_navbar_categories_are_active_only(self, api, client):
        client.categories.get_all.return_value = {"categories": []}
        api.get("/categories", params={"navbar": "true"})
        client.categories.get_all.assert_called_once_with(is_active=True, show_in_navbar=True)

    def test_active_coupons(self, api, client):
        client.coupons.active.return_value = {"coupons": [{"code": "SAVE10"}]}
        assert api.get("/coupons/active").json()["coupons"][0]["code"] == "SAVE10"

    def test_submit_review(self, api, client):
        client.reviews.create.return_value = {"review": {"_id": "r9"}}
        review = {"name": "Asha", "email": "asha@example.com", "title": "Lovely", "review": "Beautiful ring"}
        response = api.post("/reviews", json=review)
        assert response.status_code == 201
        client.reviews.create.assert_called_once_with(dict(review, rating=5))

    def test_review_rating_out_of_range(self, api, client):
        review = {"name": "Asha", "email": "asha@example.com", "title": "T", "review": "R", "rating": 6}
        assert api.post("/reviews", json=review).status_code == 422
        client.reviews.create.assert_not_called()


class TestCart:
    def test_signed_in_cart(self, api):
        response = api.get("/cart")
        assert response.status_code == 200
        data = response.json()
        assert data["cart_count"] == 1
        assert Decimal(data["cart_total"]) == Decimal("1500")

    def test_guest_cart(self, app, api, client):
        app.dependency_overrides[deps.get_owner] = lambda: CartOwner(guest_key="g1")
        client.products.get_by_id.return_value = {"product": {"_id": "p1", "finalPrice": 999}}

        response = api.post("/cart/items", json={"product_id": "p1", "quantity": 2})
        assert response.status_code == 200
        assert Decimal(response.json()["cart_total"]) == Decimal("1998")

        response = api.put("/cart/items/p404", json={"quantity": 2})
        assert response.status_code == 404

    def test_no_session(self, app, api, client):
        app.dependency_overrides.pop(deps.get_owner)
        client.token = None
        response = api.get("/cart")
        assert response.status_code == 401

    def test_guest_session_header(self, app, api, client):
        app.dependency_overrides.pop(deps.get_owner)
        client.token = None
        response = api.get("/wishlist", headers={"X-Guest-Session": "g2"})
        assert response.status_code == 200
        assert response.json() == {"items": [], "count": 0}


class TestCheckout:
    def test_full_payment_flow(self, api):
        response = api.post("/checkout", json=CHECKOUT_FORM)
        assert response.status_code == 201
        data = response.json()
        assert data["state"] == "AWAITING_PAYMENT"
        assert Decimal(data["amount"]) == Decimal("2000")
        assert data["widget_options"]["key"] == "rzp_test_key"

        checkout_id = data["id"]
        response = api.post(
            f"/checkout/{checkout_id}/payment/success",
            json={
                "razorpay_order_id": "order_GW1",
                "razorpay_payment_id": "pay_1",
                "razorpay_signature": "sig",
            },
        )
        assert response.status_code == 200
        assert response.json()["state"] == "SUCCESS"
        assert response.json()["redirect_to"] == "/orders"

        # outcome already settled
        response = api.post(f"/checkout/{checkout_id}/payment/dismiss")
        assert response.status_code == 409

    def test_payment_failure(self, api, client):
        checkout_id = api.post("/checkout", json=CHECKOUT_FORM).json()["id"]
        response = api.post(
            f"/checkout/{checkout_id}/payment/failure",
            json={"code": "BAD_REQUEST_ERROR", "description": "Card declined"},
        )
        assert response.status_code == 200
        assert response.json()["state"] == "FAILED"
        client.payment.report_failure.assert_called_once_with(
            "65f0c0ffee1234abcd", {"code": "BAD_REQUEST_ERROR", "description": "Card declined"}
        )

    def test_get_checkout(self, api):
        checkout_id = api.post("/checkout", json=CHECKOUT_FORM).json()["id"]
        response = api.get(f"/checkout/{checkout_id}")
        assert response.status_code == 200
        assert response.json()["widget_options"] is None
        assert api.get("/checkout/9999").status_code == 404

    def test_blank_phone(self, api):
        response = api.post("/checkout", json=dict(CHECKOUT_FORM, phone="  "))
        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "phone"

    def test_guest_cannot_checkout(self, app, api):
        app.dependency_overrides[deps.get_owner] = lambda: CartOwner(guest_key="g1")
        assert api.post("/checkout", json=CHECKOUT_FORM).status_code == 403

    def test_backend_unreachable(self, api, client):
        client.orders.create.side_effect = ApiError("Backend unreachable: refused")
        response = api.post("/checkout", json=CHECKOUT_FORM)
        assert response.status_code == 502

    def test_quote_with_rejected_coupon(self, api, client):
        client.coupons.validate.side_effect = ApiError("Coupon has expired", status_code=400)
        response = api.post("/checkout/quote", json={"coupon_code": "OLD"})
        assert response.status_code == 200
        data = response.json()
        assert data["coupon_error"] == "Coupon has expired"
        assert data["coupon_code"] is None
        assert Decimal(data["total"]) == Decimal("2000")

    def test_apply_coupon(self, api, client):
        response = api.post("/checkout/coupon", json={"coupon_code": "save200"})
        assert response.status_code == 200
        assert Decimal(response.json()["total"]) == Decimal("1800")

        client.coupons.validate.side_effect = ApiError("Invalid coupon code", status_code=404)
        response = api.post("/checkout/coupon", json={"coupon_code": "BOGUS"})
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_COUPON"


class TestOrders:
    def test_my_orders(self, api, client):
        client.orders.mine.return_value = {"orders": [{"_id": "o1"}]}
        response = api.get("/orders")
        assert response.status_code == 200
        assert response.json() == {"orders": [{"_id": "o1"}]}

    def test_unreadable_backend_response_is_bad_gateway(self, api, client):
        client.orders.mine.side_effect = ApiError("Invalid response from backend", status_code=200)
        assert api.get("/orders").status_code == 502

    def test_requires_sign_in(self, api, client):
        client.token = None
        assert api.get("/orders").status_code == 401


@pytest.fixture
def admin_client():
    client = MagicMock()
    client.token = "admin-token"
    client.products.get_all.return_value = {"products": [{"_id": "p1"}]}
    client.orders.get_all.return_value = {
        "orders": [
            {"_id": "o1", "orderStatus": "pending", "totalAmount": 4000, "createdAt": "2025-01-14T10:00:00Z"},
            {"_id": "o2", "orderStatus": "delivered", "totalAmount": 2500, "createdAt": "2025-01-10T10:00:00Z"},
        ]
    }
    client.coupons.get_all.return_value = {"coupons": [{"_id": "c1", "isActive": True}]}
    client.categories.get_all.return_value = {"categories": []}
    client.reviews.get_all_admin.return_value = {"reviews": []}
    client.carousel.get_all.return_value = {"slides": []}
    return client


@pytest.fixture
def admin_api(app, admin_client):
    dashboard = DashboardService(admin_client)
    app.dependency_overrides[deps.require_admin] = lambda: admin_client
    app.dependency_overrides[deps.get_dashboard] = lambda: dashboard
    return TestClient(app)


class TestAdmin:
    def test_dashboard(self, admin_api):
        response = admin_api.get("/admin/dashboard")
        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["total_orders"] == 2
        assert stats["pending_orders"] == 1
        assert Decimal(stats["total_revenue"]) == Decimal("2500")
        assert stats["total_revenue_display"] == "₹2,500.00"

    def test_dashboard_with_failed_orders(self, admin_api, admin_client):
        admin_client.orders.get_all.side_effect = ApiError("Internal error", status_code=500)
        data = admin_api.get("/admin/dashboard").json()
        assert data["orders"] == []
        assert "orders" in data["errors"]
        assert data["stats"]["total_orders"] == 0
        assert data["coupons"] == [{"_id": "c1", "isActive": True}]

    def test_order_transition_conflict(self, admin_api, admin_client):
        response = admin_api.patch("/admin/orders/o1/status", json={"status": "delivered"})
        assert response.status_code == 409
        admin_client.orders.update.assert_not_called()

    def test_unknown_order_status(self, admin_api):
        response = admin_api.patch("/admin/orders/o1/status", json={"status": "lost"})
        assert response.status_code == 400

    def test_negative_delivery_charge(self, admin_api):
        response = admin_api.patch("/admin/orders/o1/delivery-charge", json={"delivery_charge": -5})
        assert response.status_code == 422

    def test_toggle_coupon(self, admin_api, admin_client):
        admin_client.coupons.toggle.return_value = {"coupon": {"_id": "c1", "isActive": False}}
        response = admin_api.patch("/admin/coupons/c1/toggle")
        assert response.status_code == 200
        assert response.json()["coupons"] == [{"_id": "c1", "isActive": False}]

    def test_invalid_coupon_form(self, admin_api):
        response = admin_api.post("/admin/coupons", json={"code": "X", "discountValue": 150, "expiresAt": "2030-01-01"})
        assert response.status_code == 422

    def test_create_product(self, admin_api, admin_client):
        admin_client.products.create.return_value = {"product": {"_id": "p2", "itemname": "Bangle"}}
        response = admin_api.post(
            "/admin/products",
            data={"itemname": "Bangle", "itemCode": "bg-1", "basePrice": "8000", "category": "cat1"},
            files=[("itemImages", ("bangle.png", b"\x89PNG", "image/png"))],
        )
        assert response.status_code == 201
        assert [p["_id"] for p in response.json()["products"]] == ["p2", "p1"]
        fields, files = admin_client.products.create.call_args.args
        assert fields["itemCode"] == "BG-1"
        assert files[0][0] == "itemImages"

    def test_revenue(self, admin_api):
        response = admin_api.get("/admin/revenue", params={"period": "all"})
        assert response.status_code == 200
        data = response.json()
        assert data["period"] == "all"
        assert Decimal(data["current_revenue"]) == Decimal("2500")
        assert data["total_orders"] == 1

    def test_non_admin_is_forbidden(self, app, api, client):
        client.auth.profile.return_value = {"user": {"_id": "u1", "isAdmin": False}}
        assert api.get("/admin/dashboard").status_code == 403


def test_admin_actions_use_current_backend_state(app, admin_client):
    app.dependency_overrides[deps.require_admin] = lambda: admin_client
    api = TestClient(app)
    orders = api.get("/admin/dashboard").json()["orders"]
    assert orders[0]["orderStatus"] == "pending"

    admin_client.orders.get_all.return_value = {
        "orders": [{"_id": "o1", "orderStatus": "confirmed", "totalAmount": 4000}]
    }
    admin_client.orders.update.return_value = {
        "order": {"_id": "o1", "orderStatus": "processing", "totalAmount": 4000}
    }
    response = api.patch("/admin/orders/o1/status", json={"status": "processing"})

    assert response.status_code == 200
    admin_client.orders.update.assert_called_once_with("o1", {"orderStatus": "processing"})
    assert response.json()["orders"][0]["orderStatus"] == "processing"
