# storefront/model/product.py
from sqlalchemy.sql import func
from ..extensions import db
from ..utils.money import to_string_money

class Product(db.Model):
    __tablename__ = "product"
    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="ck_product_quantity_non_negative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False, index=True)
    slug = db.Column(db.String(255), nullable=False, unique=True, index=True)
    description = db.Column(db.Text, nullable=False, default="")
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    category = db.Column(db.String(120))
    brand = db.Column(db.String(120))
    color = db.Column(db.String(64))

    quantity = db.Column(db.Integer, nullable=False, default=0)
    sold = db.Column(db.Integer, nullable=False, default=0)
    total_rating = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    ratings = db.relationship(
        "ProductRating",
        backref="product",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ProductRating.id.asc()",
    )
    wishlisted = db.relationship("WishlistItem", backref="product", cascade="all, delete")

    def as_summary(self):
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "price": to_string_money(self.price),
        }

    def as_api(self):
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "description": self.description,
            "price": to_string_money(self.price),
            "category": self.category,
            "brand": self.brand,
            "color": self.color,
            "quantity": self.quantity,
            "sold": self.sold,
            "ratings": [r.as_api() for r in self.ratings],
            "totalRating": self.total_rating,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

class ProductRating(db.Model):
    __tablename__ = "product_rating"
    # one entry per rater; a second rating overwrites the first
    __table_args__ = (
        db.UniqueConstraint("product_id", "user_id", name="u_rating_product_user"),
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    star = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text)

    def as_api(self):
        return {
            "star": self.star,
            "comment": self.comment,
            "postBy": self.user_id,
        }
