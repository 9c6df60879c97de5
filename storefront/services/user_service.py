# storefront/services/user_service.py
from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..model import Cart, Order, Product, ProductRating, User, WishlistItem
from ..utils.request import parse_id
from .product_service import average_rating

ROLES = ("user", "admin")

# payload key -> column
PROFILE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "mobile": "mobile",
    "email": "email",
}


def get_user(user_id: int) -> User:
    u = db.session.get(User, user_id)
    if not u:
        raise NotFoundError("User not found")
    return u

def list_users():
    return User.query.order_by(User.id.asc()).all()

def _non_empty(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} cannot be empty")
    return value.strip()

def _commit_user():
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("User already exists")

def update_user(user_id: int, data: dict, allow_role: bool = False) -> User:
    """
    Partial profile update. ``password`` is re-hashed; ``role`` is only
    honoured for admin edits (``allow_role``).
    """
    u = get_user(user_id)

    changes = {}
    for key, column in PROFILE_FIELDS.items():
        if key in data:
            value = _non_empty(data, key)
            changes[column] = value.lower() if column == "email" else value
    if "password" in data:
        password = data.get("password")
        if not isinstance(password, str) or len(password) < 6:
            raise ValidationError("Password required, min 6 chars")
        changes["password_hash"] = generate_password_hash(password)
    if "address" in data:
        changes["address"] = _parse_address(data.get("address"))
    if allow_role and "role" in data:
        if data.get("role") not in ROLES:
            raise ValidationError(f"role must be one of: {', '.join(ROLES)}")
        changes["role"] = data["role"]

    email = changes.get("email", u.email)
    mobile = changes.get("mobile", u.mobile)
    clash = User.query.filter(or_(User.email == email, User.mobile == mobile), User.id != u.id).first()
    if clash:
        raise ConflictError("User already exists")

    for column, value in changes.items():
        setattr(u, column, value)
    _commit_user()
    current_app.logger.info("user %s updated (%s)", u.id, ", ".join(sorted(changes)) or "no changes")
    return u

def _parse_address(raw) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("address is required")
    address = raw.strip()
    if len(address) > 255:
        raise ValidationError("address must be at most 255 characters")
    return address

def save_address(user_id: int, raw) -> User:
    u = get_user(user_id)
    u.address = _parse_address(raw)
    db.session.commit()
    return u

def set_blocked(user_id: int, blocked: bool) -> User:
    u = get_user(user_id)
    u.is_blocked = blocked
    db.session.commit()
    current_app.logger.info("user %s %s", u.id, "blocked" if blocked else "unblocked")
    return u

def delete_user(user_id: int) -> dict:
    """
    Remove a user with their cart, ratings and wishlist. Users with orders
    are kept so the order history stays attributable.
    """
    u = get_user(user_id)
    if Order.query.filter_by(user_id=u.id).first():
        raise ConflictError("User has orders and cannot be deleted")
    payload = u.as_dict()

    cart = Cart.query.filter_by(user_id=u.id).first()
    if cart:
        db.session.delete(cart)
    for rating in ProductRating.query.filter_by(user_id=u.id).all():
        product = rating.product
        product.ratings.remove(rating)
        product.total_rating = average_rating(r.star for r in product.ratings)
    db.session.flush()

    db.session.delete(u)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("User is still referenced and cannot be deleted")
    current_app.logger.info("user %s deleted", user_id)
    return payload


# ---------- wishlist ----------
def toggle_wishlist(user: User, product_id) -> bool:
    """Add the product to the user's wishlist, or remove it when already there. Returns True on add."""
    if product_id in (None, ""):
        raise ValidationError("prodId is required")
    p = db.session.get(Product, parse_id(product_id, "Product not exists - Check the prodId"))
    if not p:
        raise NotFoundError("Product not exists")

    existing = next((w for w in user.wishlist_items if w.product_id == p.id), None)
    if existing:
        user.wishlist_items.remove(existing)
    else:
        user.wishlist_items.append(WishlistItem(product=p))
    db.session.commit()
    return existing is None

def wishlist_products(user: User):
    return [w.product for w in user.wishlist_items]
