# storefront/cart/routes.py
from . import bp
from ..services import cart_service, coupon_service
from ..utils.api import ok
from ..utils.decorators import current_user, login_required
from ..utils.request import json_body


def _requested_items():
    data = json_body()
    return data.get("cart")

# ---- endpoints -------------------------------------------------------------

@bp.post("/cart")
@login_required
def user_cart():
    """
    Body: { "cart": [ { "productID": int, "count": int, "color"?: str } ] }
    Creates the cart, or deletes it when the user already has one.
    """
    user = current_user()
    payload, created = cart_service.build_or_toggle_cart(user.id, _requested_items())
    if created:
        return ok(f"User {user.first_name} add this cart", payload, status=201)
    return ok(f"User {user.first_name} delete this cart", payload)

@bp.put("/cart")
@login_required
def replace_cart():
    user = current_user()
    cart = cart_service.replace_cart(user.id, _requested_items())
    return ok(f"User {user.first_name} cart replaced", cart.as_api())

@bp.get("/cart")
@login_required
def get_user_cart():
    user = current_user()
    cart = cart_service.get_cart(user.id)
    if not cart:
        return ok(f"User {user.first_name} does not have any cart.", [])
    return ok(f"User {user.first_name} cart", cart.as_api(with_products=True))

@bp.delete("/empty-cart")
@login_required
def empty_cart():
    user = current_user()
    removed = cart_service.clear_cart(user.id)
    if removed is None:
        return ok(f"User {user.first_name} does not have any cart.", [])
    return ok(f"User {user.first_name} cart is empty now", [])

@bp.post("/apply-coupon")
@login_required
def apply_coupon():
    """Body: { "coupon": str }"""
    user = current_user()
    data = json_body()
    cart = coupon_service.apply_coupon(user.id, data.get("coupon"))
    return ok(f"User {user.first_name} cart after apply coupon", cart.as_api())
