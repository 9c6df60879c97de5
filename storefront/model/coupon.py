# --- storefront/model/coupon.py ---

from ..extensions import db
from sqlalchemy.sql import func

class Coupon(db.Model):
    __tablename__ = "coupon"

    id = db.Column(db.Integer, primary_key=True)
    # stored upper-cased
    name = db.Column(db.String(64), unique=True, nullable=False, index=True)
    expiry = db.Column(db.DateTime, nullable=False)  # naive UTC
    discount = db.Column(db.Numeric(5, 2), nullable=False)  # percent

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    def is_expired(self, now) -> bool:
        return now > self.expiry

    def as_api(self):
        return {
            "id": self.id,
            "name": self.name,
            "expiry": self.expiry.isoformat() if self.expiry else None,
            "discount": float(self.discount),
        }
