# storefront/model/cart.py
from __future__ import annotations
from decimal import Decimal
from sqlalchemy.sql import func
from ..extensions import db
from ..utils.money import D, round_money, to_string_money

class Cart(db.Model):
    __tablename__ = "cart"

    id = db.Column(db.Integer, primary_key=True)
    # at most one live cart per user
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, unique=True, index=True)

    cart_total = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    # set only after a coupon was applied
    total_after_discount = db.Column(db.Numeric(12, 2), nullable=True)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    items = db.relationship(
        "CartItem",
        backref="cart",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CartItem.id.asc()",
    )

    # --------- money helpers / totals ----------
    def subtotal_dec(self) -> Decimal:
        # sum of snapshot price * count
        return round_money(sum((i.line_total_dec() for i in self.items), Decimal("0")))

    def as_api(self, with_products: bool = False):
        return {
            "id": self.id,
            "orderBy": self.user_id,
            "products": [i.as_api(with_product=with_products) for i in self.items],
            "cartTotal": to_string_money(self.cart_total),
            "totalAfterDiscount": (
                to_string_money(self.total_after_discount)
                if self.total_after_discount is not None else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class CartItem(db.Model):
    __tablename__ = "cart_item"

    id = db.Column(db.Integer, primary_key=True)
    cart_id = db.Column(db.Integer, db.ForeignKey("cart.id", ondelete="CASCADE"), nullable=False, index=True)
    # weak reference: the line keeps its captured price when the product goes away
    product_id = db.Column(db.Integer, db.ForeignKey("product.id", ondelete="SET NULL"), nullable=True, index=True)

    count = db.Column(db.Integer, nullable=False, default=1)
    color = db.Column(db.String(64), nullable=True)
    # unit price captured from the catalog when the cart was built
    price = db.Column(db.Numeric(12, 2), nullable=False)

    product = db.relationship("Product", lazy="joined")

    def line_total_dec(self) -> Decimal:
        return round_money(D(self.price) * Decimal(self.count))

    def as_api(self, with_product: bool = False):
        out = {
            "productID": self.product_id,
            "count": self.count,
            "color": self.color,
            "price": to_string_money(self.price),
        }
        if with_product:
            out["product"] = self.product.as_summary() if self.product else None
        return out
