from flask import request
from ..services import product_service, user_service
from ..utils.api import ok
from ..utils.decorators import admin_required, current_user, login_required
from ..utils.request import json_body
from . import bp

# ---------- routes ----------
@bp.post("")
@admin_required
def create_product():
    data = json_body()
    p = product_service.create_product(data)
    return ok("Product created successfully", p.as_api(), status=201)

# GET /api/products
@bp.get("")
def list_products():
    page = product_service.list_products(request.args)
    items = [p.as_api() for p in page["items"]]
    if not items:
        return ok("There's no product", [])
    return ok(f"Products page {page['meta']['page']} of {page['meta']['pages']} ({page['meta']['total']} total)", items)

@bp.get("/<int:product_id>")
def get_product(product_id: int):
    return ok("Product", product_service.get_product(product_id).as_api())

@bp.put("/rating")
@login_required
def rate_product():
    """Body: { "star": 1-5, "comment": str, "prodId": int }"""
    data = json_body()
    p = product_service.rate_product(
        current_user().id, data.get("prodId"), data.get("star"), data.get("comment"),
    )
    return ok(f"Product {p.title} rated with {p.total_rating} Star", p.as_api())

@bp.put("/wishlist")
@login_required
def toggle_wishlist():
    """Body: { "prodId": int }"""
    user = current_user()
    added = user_service.toggle_wishlist(user, json_body().get("prodId"))
    return ok("Wishlist | Unwishlist success", {"added": added, "user": user.as_dict()})

@bp.put("/<int:product_id>")
@admin_required
def update_product(product_id: int):
    data = json_body()
    p = product_service.update_product(product_id, data)
    return ok("Product updated", p.as_api())

@bp.delete("/<int:product_id>")
@admin_required
def delete_product(product_id: int):
    return ok("Product deleted", product_service.delete_product(product_id))
