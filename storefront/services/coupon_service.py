# storefront/services/coupon_service.py
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from flask import current_app
from sqlalchemy.exc import IntegrityError
from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..model import Cart, Coupon
from ..utils.money import D, round_money

def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)

def _parse_iso8601(s):
    if not s or not isinstance(s, str): return None
    s = s.strip()
    if s.endswith("Z"): s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt

def _parse_discount(raw) -> Decimal:
    if isinstance(raw, bool):
        raise ValidationError("discount must be numeric")
    try:
        value = D(raw)
    except (InvalidOperation, ValueError):
        raise ValidationError("discount must be numeric")
    if not value.is_finite():
        raise ValidationError("discount must be numeric")
    if not 0 <= value <= 100:
        raise ValidationError("discount must be between 0 and 100")
    return round_money(value)

def _normalize_name(name) -> str:
    return (name or "").strip().upper() if isinstance(name, str) else ""

def discounted_total(cart_total, discount) -> Decimal:
    """cartTotal minus ``discount`` percent, rounded half-up to cents."""
    total = D(cart_total)
    return round_money(total - (total * D(discount) / Decimal("100")))


def get_coupon(coupon_id: int) -> Coupon:
    c = db.session.get(Coupon, coupon_id)
    if not c:
        raise NotFoundError("Coupon not found")
    return c

def list_coupons():
    return Coupon.query.order_by(Coupon.id.desc()).all()

def create_coupon_from_payload(data: dict) -> Coupon:
    name = _normalize_name(data.get("name"))
    raw_expiry = data.get("expiry")
    raw_discount = data.get("discount")
    if not name or not raw_expiry or raw_discount in (None, ""):
        raise ValidationError("All fields (name, expiry, discount) are required")

    expiry = _parse_iso8601(raw_expiry)
    if not expiry:
        raise ValidationError("Invalid datetime format for expiry")
    discount = _parse_discount(raw_discount)

    if Coupon.query.filter_by(name=name).first():
        raise ConflictError("Coupon already exists, please change coupon name")

    c = Coupon(name=name, expiry=expiry, discount=discount)
    db.session.add(c)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Coupon already exists, please change coupon name")
    current_app.logger.info("coupon %s created (%s%%, expires %s)", c.name, c.discount, c.expiry.isoformat())
    return c

def update_coupon_from_payload(coupon_id: int, data: dict) -> Coupon:
    c = get_coupon(coupon_id)

    if "name" in data:
        name = _normalize_name(data.get("name"))
        if not name:
            raise ValidationError("name cannot be empty")
        clash = Coupon.query.filter(Coupon.name == name, Coupon.id != c.id).first()
        if clash:
            raise ConflictError("Coupon already exists, please change coupon name")
        c.name = name
    if "expiry" in data:
        expiry = _parse_iso8601(data.get("expiry"))
        if not expiry:
            raise ValidationError("Invalid datetime format for expiry")
        c.expiry = expiry
    if "discount" in data:
        c.discount = _parse_discount(data.get("discount"))

    db.session.commit()
    return c

def delete_coupon(coupon_id: int) -> dict:
    c = get_coupon(coupon_id)
    payload = c.as_api()
    db.session.delete(c)
    db.session.commit()
    return payload


def apply_coupon(user_id: int, code) -> Cart:
    """
    Validate ``code`` and store the discounted total on the user's cart.
    Re-applying recomputes from the current cartTotal, so the result is stable.
    """
    name = _normalize_name(code)
    if not name:
        raise ValidationError("coupon is required")

    coupon = Coupon.query.filter_by(name=name).first()
    if not coupon:
        raise NotFoundError("Invalid Coupon")
    if coupon.is_expired(utcnow()):
        raise ValidationError("Coupon expired")

    cart = Cart.query.filter_by(user_id=user_id).first()
    if not cart:
        raise ValidationError("User does not have any cart")

    cart.total_after_discount = discounted_total(cart.cart_total, coupon.discount)
    db.session.commit()
    current_app.logger.info(
        "coupon %s applied to cart %s: %s -> %s",
        coupon.name, cart.id, cart.cart_total, cart.total_after_discount,
    )
    return cart
