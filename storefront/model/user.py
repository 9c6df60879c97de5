# --- storefront/model/user.py ---

from sqlalchemy.sql import func
from ..extensions import db

class User(db.Model):
    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    mobile = db.Column(db.String(32), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False, default="")
    role = db.Column(db.String(50), nullable=False, default="user", index=True)  # user, admin
    is_blocked = db.Column(db.Boolean, nullable=False, default=False)
    address = db.Column(db.String(255))

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    wishlist_items = db.relationship(
        "WishlistItem",
        backref="user",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="WishlistItem.id.asc()",
    )

    def as_dict(self):
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "mobile": self.mobile,
            "email": self.email,
            "role": self.role,
            "isBlocked": bool(self.is_blocked),
            "address": self.address,
            "wishlist": [w.product_id for w in self.wishlist_items],
        }


class WishlistItem(db.Model):
    __tablename__ = "wishlist_item"
    __table_args__ = (
        db.UniqueConstraint("user_id", "product_id", name="u_wishlist_user_product"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, server_default=func.now())
