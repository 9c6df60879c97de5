# storefront/order/routes.py
from ..utils.request import json_body
from . import bp
from ..services import order_service
from ..utils.api import ok
from ..utils.decorators import admin_required, current_user, login_required

@bp.post("/cash-order")
@login_required
def create_order():
    """Body: { "COD": bool, "couponApplied": bool }"""
    user = current_user()
    data = json_body()
    order = order_service.commit_order(user.id, data.get("COD"), data.get("couponApplied", False))
    return ok(f"User {user.first_name} create new order", order.as_api(), status=201)

@bp.get("/orders")
@login_required
def own_orders():
    user = current_user()
    orders = order_service.orders_for_user(user.id)
    if not orders:
        return ok(f"User {user.first_name} does not have any order.", [])
    return ok(f"User {user.first_name} orders", [o.as_api() for o in orders])

@bp.get("/orders/<int:user_id>")
@admin_required
def user_orders(user_id: int):
    orders = order_service.orders_for_user(user_id)
    return ok(f"User {user_id} orders", [o.as_api() for o in orders])

@bp.put("/orders/<int:order_id>")
@admin_required
def update_order_status(order_id: int):
    """Body: { "status": OrderStatus }"""
    data = json_body()
    order = order_service.update_order_status(order_id, data.get("status"))
    return ok("Order status changed", order.as_api())
