from flask import Blueprint

bp = Blueprint("enquiry", __name__, url_prefix="/api/enquiry")

from . import routes  # noqa: E402,F401
