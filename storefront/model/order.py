import enum
from sqlalchemy.sql import func
from ..extensions import db
from ..utils.money import to_string_money


class OrderStatus(str, enum.Enum):
    NotProcessed = "Not Processed"
    CashOnDelivery = "Cash on Delivery"
    Processing = "Processing"
    Dispatched = "Dispatched"
    Cancelled = "Cancelled"
    Delivered = "Delivered"

    @classmethod
    def parse(cls, value):
        """Accept either the display value ("Cash on Delivery") or the member name."""
        if isinstance(value, str):
            for s in cls:
                if value == s.value or value == s.name:
                    return s
        return None


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    order_status = db.Column(db.String(32), nullable=False, default=OrderStatus.NotProcessed.value, index=True)

    # payment intent snapshot
    payment_id = db.Column(db.String(36), unique=True, nullable=False)
    payment_method = db.Column(db.String(16), nullable=False, default="COD")
    payment_amount = db.Column(db.Numeric(12, 2), nullable=False)
    payment_status = db.Column(db.String(32), nullable=False)
    payment_created = db.Column(db.DateTime, nullable=False)
    payment_currency = db.Column(db.String(8), nullable=False, default="usd")

    created_at = db.Column(db.DateTime, server_default=func.now(), index=True)
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    items = db.relationship(
        "OrderItem",
        backref="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id.asc()",
    )

    def set_status(self, status: OrderStatus):
        # both fields move together
        self.order_status = status.value
        self.payment_status = status.value

    def as_api(self):
        return {
            "id": self.id,
            "products": [i.as_api() for i in self.items],
            "paymentIntent": {
                "id": self.payment_id,
                "method": self.payment_method,
                "amount": to_string_money(self.payment_amount),
                "status": self.payment_status,
                "created": self.payment_created.isoformat() if self.payment_created else None,
                "currency": self.payment_currency,
            },
            "orderStatus": self.order_status,
            "orderBy": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

class OrderItem(db.Model):
    __tablename__ = "order_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)

    # weak reference: the line keeps its captured price when the product goes away
    product_id = db.Column(db.Integer, db.ForeignKey("product.id", ondelete="SET NULL"), nullable=True, index=True)
    count = db.Column(db.Integer, nullable=False)
    color = db.Column(db.String(64))
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)

    def as_api(self):
        return {
            "productID": self.product_id,
            "count": self.count,
            "color": self.color,
            "price": to_string_money(self.unit_price),
        }
