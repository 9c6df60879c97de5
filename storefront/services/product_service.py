# storefront/services/product_service.py
import re
from decimal import InvalidOperation
from flask import current_app
from sqlalchemy import asc, desc
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..model import Product, ProductRating
from ..utils.money import D, round_money, round_whole
from ..utils.request import parse_id

# ---------- helpers ----------
def slugify(text):
    text = text.strip().lower()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return text.strip("-")

def _parse_int(v, default=0):
    try:
        return int(v)
    except (TypeError, ValueError):
        return default

def _parse_opt_price(v):
    if v is None or (isinstance(v, str) and v.strip() == ""):
        return None
    try:
        return D(v)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid price filter: {v}")

def _require_price(v):
    if v is None or isinstance(v, bool):
        raise ValidationError("price is required")
    try:
        price = D(v)
    except (InvalidOperation, ValueError):
        raise ValidationError("price must be numeric")
    if not price.is_finite() or price < 0:
        raise ValidationError("price must be >= 0")
    return round_money(price)

def _require_quantity(v):
    if isinstance(v, bool) or (isinstance(v, float) and not v.is_integer()):
        raise ValidationError("quantity must be an integer >= 0")
    try:
        q = int(v)
    except (TypeError, ValueError):
        raise ValidationError("quantity must be an integer >= 0")
    if q < 0:
        raise ValidationError("quantity must be an integer >= 0")
    return q

SORTS = {
    "title": asc(Product.title), "-title": desc(Product.title),
    "price": asc(Product.price), "-price": desc(Product.price),
    "createdAt": asc(Product.created_at), "-createdAt": desc(Product.created_at),
}

def list_products(args) -> dict:
    """
    Recognised query params:
      minPrice, maxPrice -> inclusive price bounds
      sort               -> title, -title, price, -price, createdAt, -createdAt
      page               -> default 1
      limit              -> default 20 (cap 100)
    """
    query = Product.query
    min_price = _parse_opt_price(args.get("minPrice"))
    max_price = _parse_opt_price(args.get("maxPrice"))
    if min_price is not None:
        query = query.filter(Product.price >= min_price)
    if max_price is not None:
        query = query.filter(Product.price <= max_price)

    query = query.order_by(SORTS.get((args.get("sort") or "").strip(), desc(Product.id)), Product.id)

    page = max(_parse_int(args.get("page"), 1), 1)
    limit = min(max(_parse_int(args.get("limit"), 20), 1), 100)
    paged = query.paginate(page=page, per_page=limit, error_out=False)
    return {
        "meta": {"page": paged.page, "pages": paged.pages or 1, "limit": limit, "total": paged.total},
        "items": paged.items,
    }

def get_product(product_id) -> Product:
    p = db.session.get(Product, product_id)
    if not p:
        raise NotFoundError("Product not found")
    return p

def _commit_unique(p: Product):
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"Product with slug '{p.slug}' already exists")

def create_product(data: dict) -> Product:
    title = (data.get("title") or "").strip() if isinstance(data.get("title"), str) else ""
    if not title:
        raise ValidationError("title is required")
    slug = slugify(title)
    if not slug:
        raise ValidationError("title must contain letters or digits")
    if Product.query.filter_by(slug=slug).first():
        raise ConflictError(f"Product with slug '{slug}' already exists")

    p = Product(
        title=title,
        slug=slug,
        description=data.get("description") or "",
        price=_require_price(data.get("price")),
        quantity=_require_quantity(data.get("quantity")),
        category=data.get("category"),
        brand=data.get("brand"),
        color=data.get("color"),
    )
    db.session.add(p)
    _commit_unique(p)
    current_app.logger.info("product %s created (%s)", p.id, p.slug)
    return p

def update_product(product_id, data: dict) -> Product:
    p = get_product(product_id)
    if "title" in data:
        title = (data.get("title") or "").strip() if isinstance(data.get("title"), str) else ""
        if not title or not slugify(title):
            raise ValidationError("title cannot be empty")
        slug = slugify(title)
        if Product.query.filter(Product.slug == slug, Product.id != p.id).first():
            raise ConflictError(f"Product with slug '{slug}' already exists")
        p.title, p.slug = title, slug
    if "price" in data:
        p.price = _require_price(data.get("price"))
    if "quantity" in data:
        p.quantity = _require_quantity(data.get("quantity"))
    for field in ("description", "category", "brand", "color"):
        if field in data:
            setattr(p, field, data.get(field))
    _commit_unique(p)
    return p

def delete_product(product_id) -> dict:
    p = get_product(product_id)
    payload = p.as_api()
    db.session.delete(p)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Product is still referenced by carts or orders")
    current_app.logger.info("product %s deleted", product_id)
    return payload


# ---------- ratings ----------
def _parse_star(v) -> int:
    if isinstance(v, bool) or (isinstance(v, float) and not v.is_integer()):
        raise ValidationError("star must be an integer between 1 and 5")
    try:
        star = int(v)
    except (TypeError, ValueError):
        raise ValidationError("star must be an integer between 1 and 5")
    if not 1 <= star <= 5:
        raise ValidationError("star must be an integer between 1 and 5")
    return star

def average_rating(stars) -> int:
    stars = list(stars)
    if not stars:
        return 0
    return round_whole(D(sum(stars)) / len(stars))

def rate_product(user_id: int, product_id, star, comment=None) -> Product:
    """Insert or overwrite the caller's rating, then recompute totalRating over all raters."""
    if product_id in (None, ""):
        raise ValidationError("prodId is required")
    star = _parse_star(star)
    p = db.session.get(Product, parse_id(product_id, "Product not exists - Check the prodId"))
    if not p:
        raise ValidationError("Product not exists - Check the prodId")

    existing = next((r for r in p.ratings if r.user_id == user_id), None)
    if existing:
        existing.star = star
        existing.comment = comment
    else:
        p.ratings.append(ProductRating(user_id=user_id, star=star, comment=comment))

    p.total_rating = average_rating(r.star for r in p.ratings)
    db.session.commit()
    current_app.logger.info("product %s rated %s by user %s, total %s", p.id, star, user_id, p.total_rating)
    return p
