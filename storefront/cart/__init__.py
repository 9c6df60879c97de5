from flask import Blueprint

bp = Blueprint("cart", __name__, url_prefix="/api/users")

from . import routes  # noqa: E402,F401
