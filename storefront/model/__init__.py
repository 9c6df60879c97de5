# ------ storefront/model/__init__.py ------

from .user import User, WishlistItem
from .product import Product, ProductRating
from .cart import Cart, CartItem
from .coupon import Coupon
from .order import Order, OrderItem, OrderStatus
from .enquiry import Enquiry, EnquiryStatus

__all__ = [
    "User",
    "WishlistItem",
    "Product",
    "ProductRating",
    "Cart",
    "CartItem",
    "Coupon",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Enquiry",
    "EnquiryStatus",
]
