from datetime import timedelta
from decimal import Decimal

import pytest

from storefront.model import Cart, Coupon
from storefront.services.coupon_service import discounted_total


def _cart(client, headers, product, count=1):
    return client.post("/api/users/cart", json={"cart": [{"productID": product.id, "count": count}]}, headers=headers)


@pytest.mark.parametrize("total, discount, expected", [
    ("100.00", 20, "80.00"),
    ("59.99", 15, "50.99"),
    ("10.00", 0, "10.00"),
    ("10.00", 100, "0.00"),
])
def test_discounted_total(total, discount, expected):
    assert discounted_total(Decimal(total), discount) == Decimal(expected)


def test_apply_coupon_sets_total_after_discount(client, auth_headers, make_product, make_coupon, user):
    p = make_product(price="50.00")
    _cart(client, auth_headers, p, count=2)
    make_coupon(name="SAVE20", discount=20)

    resp = client.post("/api/users/apply-coupon", json={"coupon": "SAVE20"}, headers=auth_headers)

    assert resp.status_code == 200
    assert resp.get_json()["data"][0]["totalAfterDiscount"] == "80.00"
    assert Cart.query.filter_by(user_id=user.id).one().total_after_discount == Decimal("80.00")


def test_apply_coupon_is_idempotent_and_case_insensitive(client, auth_headers, make_product, make_coupon):
    p = make_product(price="100.00")
    _cart(client, auth_headers, p)
    make_coupon(name="SAVE20", discount=20)

    first = client.post("/api/users/apply-coupon", json={"coupon": "save20"}, headers=auth_headers)
    second = client.post("/api/users/apply-coupon", json={"coupon": "SAVE20"}, headers=auth_headers)

    assert first.get_json()["data"][0]["totalAfterDiscount"] == "80.00"
    assert second.get_json()["data"][0]["totalAfterDiscount"] == "80.00"


def test_expired_coupon_rejected(client, auth_headers, make_product, make_coupon, user):
    p = make_product(price="100.00")
    _cart(client, auth_headers, p)
    make_coupon(name="OLD", discount=50, expires_in=timedelta(seconds=-1))

    resp = client.post("/api/users/apply-coupon", json={"coupon": "OLD"}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Coupon expired"
    assert Cart.query.filter_by(user_id=user.id).one().total_after_discount is None


def test_unknown_coupon_is_not_found(client, auth_headers, make_product):
    _cart(client, auth_headers, make_product())
    resp = client.post("/api/users/apply-coupon", json={"coupon": "NOPE"}, headers=auth_headers)
    assert resp.status_code == 404


def test_coupon_requires_cart(client, auth_headers, make_coupon):
    make_coupon()
    resp = client.post("/api/users/apply-coupon", json={"coupon": "SAVE20"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "User does not have any cart"


def test_admin_creates_coupon_with_upper_cased_name(client, admin_headers):
    resp = client.post("/api/coupons", json={
        "name": "spring", "expiry": "2099-01-01T00:00:00Z", "discount": 15,
    }, headers=admin_headers)

    assert resp.status_code == 201
    data = resp.get_json()["data"][0]
    assert data["name"] == "SPRING"
    assert data["discount"] == 15.0

    dup = client.post("/api/coupons", json={
        "name": "Spring", "expiry": "2099-01-01", "discount": 5,
    }, headers=admin_headers)
    assert dup.status_code == 400


def test_coupon_create_validation(client, admin_headers):
    missing = client.post("/api/coupons", json={"name": "X"}, headers=admin_headers)
    assert missing.status_code == 400
    bad_date = client.post("/api/coupons", json={"name": "X", "expiry": "soon", "discount": 5}, headers=admin_headers)
    assert bad_date.status_code == 400
    assert bad_date.get_json()["message"] == "Invalid datetime format for expiry"


def test_coupon_admin_crud(client, admin_headers, make_coupon):
    c = make_coupon(name="TEN", discount=10)

    listed = client.get("/api/coupons", headers=admin_headers)
    assert [x["name"] for x in listed.get_json()["data"]] == ["TEN"]

    updated = client.put(f"/api/coupons/{c.id}", json={"discount": 12.5}, headers=admin_headers)
    assert updated.get_json()["data"][0]["discount"] == 12.5

    deleted = client.delete(f"/api/coupons/{c.id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert Coupon.query.count() == 0
    assert client.get(f"/api/coupons/{c.id}", headers=admin_headers).status_code == 404


def test_coupon_routes_need_admin(client, auth_headers):
    resp = client.get("/api/coupons", headers=auth_headers)
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Unauthorized - You are not admin"


@pytest.mark.parametrize("discount", [-1, 100.01, 1000, "NaN"])
def test_coupon_discount_must_be_a_percentage(client, admin_headers, make_coupon, db, discount):
    resp = client.post("/api/coupons", json={
        "name": "BIG", "expiry": "2099-01-01", "discount": discount,
    }, headers=admin_headers)
    assert resp.status_code == 400
    assert Coupon.query.filter_by(name="BIG").count() == 0

    c = make_coupon(name="TEN", discount=10)
    update = client.put(f"/api/coupons/{c.id}", json={"discount": discount}, headers=admin_headers)
    assert update.status_code == 400
    assert float(db.session.get(Coupon, c.id).discount) == 10.0


def test_full_discount_is_allowed(client, admin_headers):
    resp = client.post("/api/coupons", json={"name": "FREE", "expiry": "2099-01-01", "discount": 100}, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.get_json()["data"][0]["discount"] == 100.0
