# storefront/services/order_service.py
import uuid
from flask import current_app
from sqlalchemy import update

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..model import Cart, Order, OrderItem, OrderStatus, Product, User
from .coupon_service import utcnow


def final_amount(cart: Cart, coupon_applied: bool):
    if coupon_applied and cart.total_after_discount is not None:
        return cart.total_after_discount
    return cart.cart_total

def _decrement_stock(product_id: int, count: int) -> bool:
    """quantity -= count, sold += count, only while enough stock is left."""
    result = db.session.execute(
        update(Product)
        .where(Product.id == product_id, Product.quantity >= count)
        .values(quantity=Product.quantity - count, sold=Product.sold + count)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def commit_order(user_id: int, cod, coupon_applied=False) -> Order:
    """
    Turn the user's cart into a cash-on-delivery order.

    The order row and every stock decrement share one transaction: if any
    product lacks stock the whole order is rolled back. The cart is kept.
    """
    if not cod:
        raise ValidationError("Create cash order failed!! COD is required")

    cart = Cart.query.filter_by(user_id=user_id).first()
    if not cart:
        raise ValidationError("User does not have any cart")
    if not cart.items:
        raise ValidationError("Cart is empty")
    if any(it.product_id is None for it in cart.items):
        raise ConflictError("Cart holds a product that no longer exists")

    status = OrderStatus.CashOnDelivery
    order = Order(
        user_id=user_id,
        payment_id=str(uuid.uuid4()),
        payment_method="COD",
        payment_amount=final_amount(cart, bool(coupon_applied)),
        payment_created=utcnow(),
        payment_currency=current_app.config.get("CURRENCY", "usd"),
        items=[
            OrderItem(product_id=it.product_id, count=it.count, color=it.color, unit_price=it.price)
            for it in cart.items
        ],
    )
    order.set_status(status)

    try:
        db.session.add(order)
        db.session.flush()
        for it in cart.items:
            if not _decrement_stock(it.product_id, it.count):
                current_app.logger.warning(
                    "order for user %s rejected: product %s cannot cover count %s",
                    user_id, it.product_id, it.count,
                )
                raise ConflictError(f"Insufficient stock for product {it.product_id}")
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        "order %s created for user %s (%s %s)",
        order.id, user_id, order.payment_amount, order.payment_currency,
    )
    return order


def orders_for_user(user_id: int):
    if not db.session.get(User, user_id):
        raise NotFoundError("User not exists")
    return (Order.query.filter_by(user_id=user_id)
                 .order_by(Order.created_at.desc(), Order.id.desc())
                 .all())

def update_order_status(order_id: int, raw_status) -> Order:
    if not raw_status:
        raise ValidationError("'status' field is required")
    status = OrderStatus.parse(raw_status)
    if status is None:
        raise ValidationError(f"Invalid status: {raw_status}")

    order = db.session.get(Order, order_id)
    if not order:
        raise NotFoundError("This order not exists")

    order.set_status(status)
    db.session.commit()
    current_app.logger.info("order %s status -> %s", order.id, status.value)
    return order
