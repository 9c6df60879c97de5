# storefront/services/cart_service.py
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..model import Cart, CartItem, Product, User
from ..utils.request import parse_id


def _parse_count(raw) -> int:
    if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
        raise ValidationError("count must be an integer >= 1")
    try:
        count = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("count must be an integer >= 1")
    if count < 1:
        raise ValidationError("count must be an integer >= 1")
    return count

def sanitize_requested_items(items):
    """
    Normalise the client payload ``[{productID, count, color?}]``.
    Only ids, counts and colors are taken from the client; prices never are.
    """
    if not isinstance(items, list) or not items:
        raise ValidationError("Cart is required & must be a non-empty array")
    out = []
    for raw in items:
        if not isinstance(raw, dict):
            raise ValidationError("Each cart entry must be an object")
        pid = raw.get("productID", raw.get("product_id"))
        if pid is None:
            raise ValidationError("productID is required")
        color = raw.get("color")
        out.append({
            "product_id": parse_id(pid, f"Invalid productID: {pid}"),
            "count": _parse_count(raw.get("count")),
            "color": str(color) if color not in (None, "") else None,
        })
    return out


def _require_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user

def get_cart(user_id: int) -> Cart | None:
    return Cart.query.filter_by(user_id=user_id).first()

def _assemble(user_id: int, items) -> Cart:
    """Resolve every product first; nothing is added to the session on failure."""
    ids = {it["product_id"] for it in items}
    products = {p.id: p for p in Product.query.filter(Product.id.in_(ids)).all()}

    lines = []
    for it in items:
        p = products.get(it["product_id"])
        if not p:
            raise ValidationError(f"Product not exists: {it['product_id']}")
        lines.append(CartItem(
            product_id=p.id,
            count=it["count"],
            color=it["color"],
            price=p.price,
        ))

    cart = Cart(user_id=user_id, items=lines)
    cart.cart_total = cart.subtotal_dec()
    return cart

def _persist_new(cart: Cart) -> Cart:
    db.session.add(cart)
    try:
        db.session.commit()
    except IntegrityError:
        # another request created this user's cart first
        db.session.rollback()
        raise ConflictError("User already has a cart")
    return cart


def create_cart(user_id: int, items) -> Cart:
    _require_user(user_id)
    items = sanitize_requested_items(items)
    if get_cart(user_id):
        raise ConflictError("User already has a cart")
    cart = _persist_new(_assemble(user_id, items))
    current_app.logger.info("cart %s created for user %s (total %s)", cart.id, user_id, cart.cart_total)
    return cart

def build_or_toggle_cart(user_id: int, items):
    """
    Single-call toggle: when the user already has a cart it is deleted and
    returned (``items`` is ignored); otherwise a cart is built from ``items``.
    Returns ``(cart_payload, created)``.
    """
    _require_user(user_id)
    if not isinstance(items, list):
        raise ValidationError("Cart is required & must be an array")

    existing = get_cart(user_id)
    if existing:
        payload = existing.as_api()
        db.session.delete(existing)
        db.session.commit()
        current_app.logger.info("cart %s toggled off for user %s", payload["id"], user_id)
        return payload, False

    items = sanitize_requested_items(items)
    cart = _persist_new(_assemble(user_id, items))
    current_app.logger.info("cart %s created for user %s (total %s)", cart.id, user_id, cart.cart_total)
    return cart.as_api(), True

def replace_cart(user_id: int, items) -> Cart:
    _require_user(user_id)
    items = sanitize_requested_items(items)
    cart = _assemble(user_id, items)

    existing = get_cart(user_id)
    if existing:
        db.session.delete(existing)
        db.session.flush()
    cart = _persist_new(cart)
    current_app.logger.info("cart replaced for user %s (total %s)", user_id, cart.cart_total)
    return cart

def clear_cart(user_id: int) -> dict | None:
    existing = get_cart(user_id)
    if not existing:
        return None
    payload = existing.as_api()
    db.session.delete(existing)
    db.session.commit()
    current_app.logger.info("cart %s cleared for user %s", payload["id"], user_id)
    return payload
