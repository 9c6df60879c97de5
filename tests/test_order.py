
from storefront.model import Cart, Order, OrderStatus, Product


def _cart(client, headers, *lines):
    items = [{"productID": p.id, "count": n} for p, n in lines]
    resp = client.post("/api/users/cart", json={"cart": items}, headers=headers)
    assert resp.status_code == 201
    return resp


def _cash_order(client, headers, **body):
    body.setdefault("COD", True)
    return client.post("/api/users/cash-order", json=body, headers=headers)


def test_commit_order_decrements_stock_and_increments_sold(client, auth_headers, make_product, user, db):
    p = make_product(price="10.00", quantity=5)
    _cart(client, auth_headers, (p, 3))

    resp = _cash_order(client, auth_headers)

    assert resp.status_code == 201
    order = resp.get_json()["data"][0]
    assert order["orderStatus"] == OrderStatus.CashOnDelivery.value
    assert order["orderBy"] == user.id
    intent = order["paymentIntent"]
    assert intent["method"] == "COD"
    assert intent["amount"] == "30.00"
    assert intent["status"] == "Cash on Delivery"
    assert intent["currency"] == "usd"
    assert intent["id"]
    assert order["products"] == [{"productID": p.id, "count": 3, "color": None, "price": "10.00"}]

    product = db.session.get(Product, p.id)
    assert (product.quantity, product.sold) == (2, 3)


def test_order_uses_discount_only_when_coupon_applied(client, auth_headers, make_product, make_coupon):
    p = make_product(price="100.00", quantity=10)
    _cart(client, auth_headers, (p, 1))
    make_coupon(name="SAVE20", discount=20)
    client.post("/api/users/apply-coupon", json={"coupon": "SAVE20"}, headers=auth_headers)

    with_coupon = _cash_order(client, auth_headers, couponApplied=True)
    without_coupon = _cash_order(client, auth_headers, couponApplied=False)

    assert with_coupon.get_json()["data"][0]["paymentIntent"]["amount"] == "80.00"
    assert without_coupon.get_json()["data"][0]["paymentIntent"]["amount"] == "100.00"


def test_coupon_flag_without_discount_falls_back_to_cart_total(client, auth_headers, make_product):
    p = make_product(price="15.00", quantity=10)
    _cart(client, auth_headers, (p, 2))

    resp = _cash_order(client, auth_headers, couponApplied=True)

    assert resp.get_json()["data"][0]["paymentIntent"]["amount"] == "30.00"


def test_order_keeps_cart(client, auth_headers, make_product, user):
    p = make_product(quantity=10)
    _cart(client, auth_headers, (p, 1))
    _cash_order(client, auth_headers)
    assert Cart.query.filter_by(user_id=user.id).count() == 1


def test_order_requires_cod(client, auth_headers, make_product):
    p = make_product()
    _cart(client, auth_headers, (p, 1))
    resp = _cash_order(client, auth_headers, COD=False)
    assert resp.status_code == 400
    assert Order.query.count() == 0


def test_order_requires_cart(client, auth_headers):
    resp = _cash_order(client, auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "User does not have any cart"


def test_insufficient_stock_rolls_back_whole_order(client, auth_headers, make_product, db):
    plenty = make_product(price="1.00", quantity=10)
    scarce = make_product(price="1.00", quantity=1)
    _cart(client, auth_headers, (plenty, 2), (scarce, 2))

    resp = _cash_order(client, auth_headers)

    assert resp.status_code == 400
    assert "Insufficient stock" in resp.get_json()["message"]
    assert Order.query.count() == 0
    assert db.session.get(Product, plenty.id).quantity == 10
    assert db.session.get(Product, plenty.id).sold == 0
    assert db.session.get(Product, scarce.id).quantity == 1


def test_stock_never_goes_negative_across_orders(client, auth_headers, other_headers, make_product, db):
    p = make_product(quantity=3)
    _cart(client, auth_headers, (p, 2))
    _cart(client, other_headers, (p, 2))

    assert _cash_order(client, auth_headers).status_code == 201
    assert _cash_order(client, other_headers).status_code == 400
    assert db.session.get(Product, p.id).quantity == 1


def test_own_orders_lists_only_callers_orders(client, auth_headers, other_headers, make_product):
    p = make_product(quantity=10)
    _cart(client, auth_headers, (p, 1))
    _cash_order(client, auth_headers)
    _cash_order(client, auth_headers)

    mine = client.get("/api/users/orders", headers=auth_headers)
    theirs = client.get("/api/users/orders", headers=other_headers)

    assert len(mine.get_json()["data"]) == 2
    assert theirs.get_json()["data"] == []


def test_admin_reads_user_orders(client, auth_headers, admin_headers, make_product, user):
    p = make_product(quantity=10)
    _cart(client, auth_headers, (p, 1))
    _cash_order(client, auth_headers)

    resp = client.get(f"/api/users/orders/{user.id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"][0]["orderBy"] == user.id

    assert client.get("/api/users/orders/424242", headers=admin_headers).status_code == 404
    assert client.get(f"/api/users/orders/{user.id}", headers=auth_headers).status_code == 401


def test_update_order_status_moves_both_fields(client, auth_headers, admin_headers, make_product, db):
    p = make_product(quantity=10)
    _cart(client, auth_headers, (p, 1))
    order_id = _cash_order(client, auth_headers).get_json()["data"][0]["id"]

    resp = client.put(f"/api/users/orders/{order_id}", json={"status": "Dispatched"}, headers=admin_headers)

    assert resp.status_code == 200
    data = resp.get_json()["data"][0]
    assert data["orderStatus"] == "Dispatched"
    assert data["paymentIntent"]["status"] == "Dispatched"

    by_name = client.put(f"/api/users/orders/{order_id}", json={"status": "NotProcessed"}, headers=admin_headers)
    assert by_name.get_json()["data"][0]["orderStatus"] == "Not Processed"


def test_update_order_status_rejects_unknown_status(client, auth_headers, admin_headers, make_product, db):
    p = make_product(quantity=10)
    _cart(client, auth_headers, (p, 1))
    order_id = _cash_order(client, auth_headers).get_json()["data"][0]["id"]

    resp = client.put(f"/api/users/orders/{order_id}", json={"status": "Shipped-ish"}, headers=admin_headers)

    assert resp.status_code == 400
    order = db.session.get(Order, order_id)
    assert order.order_status == OrderStatus.CashOnDelivery.value
    assert order.payment_status == OrderStatus.CashOnDelivery.value


def test_update_status_of_missing_order(client, admin_headers):
    resp = client.put("/api/users/orders/777", json={"status": "Delivered"}, headers=admin_headers)
    assert resp.status_code == 404


def test_order_status_parse():
    assert OrderStatus.parse("Cash on Delivery") is OrderStatus.CashOnDelivery
    assert OrderStatus.parse("Cancelled") is OrderStatus.Cancelled
    assert OrderStatus.parse("cancelled") is None
    assert OrderStatus.parse(3) is None
