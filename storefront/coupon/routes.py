# storefront/coupon/routes.py
from ..utils.request import json_body
from ..services import coupon_service
from ..utils.api import ok
from ..utils.decorators import admin_required
from . import bp

@bp.post("")
@admin_required
def create_coupon():
    data = json_body()
    c = coupon_service.create_coupon_from_payload(data)
    return ok("Coupon created successfully", c.as_api(), status=201)

@bp.get("")
@admin_required
def list_coupons():
    items = coupon_service.list_coupons()
    if not items:
        return ok("There's no coupon", [])
    return ok("All coupons", [c.as_api() for c in items])

@bp.get("/<int:coupon_id>")
@admin_required
def get_coupon(coupon_id: int):
    return ok("Coupon", coupon_service.get_coupon(coupon_id).as_api())

@bp.put("/<int:coupon_id>")
@admin_required
def update_coupon(coupon_id: int):
    data = json_body()
    c = coupon_service.update_coupon_from_payload(coupon_id, data)
    return ok("Coupon updated", c.as_api())

@bp.delete("/<int:coupon_id>")
@admin_required
def delete_coupon(coupon_id: int):
    return ok("Coupon deleted", coupon_service.delete_coupon(coupon_id))
