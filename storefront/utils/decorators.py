# ------- storefront/utils/decorators.py -------
from functools import wraps
from flask import g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from ..extensions import db
from ..errors import AuthorizationError, NotFoundError
from ..model.user import User

def _current_user():
    verify_jwt_in_request()
    uid = get_jwt_identity()
    try:
        uid = int(uid)
    except (TypeError, ValueError):
        raise AuthorizationError("Unauthorized - Invalid token")
    user = db.session.get(User, uid)
    if not user:
        raise NotFoundError("User not found")
    if user.is_blocked:
        raise AuthorizationError("Unauthorized - User is blocked")
    return user

def current_user() -> User:
    """The user resolved by @login_required / @admin_required for this request."""
    return g.current_user

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        g.current_user = _current_user()
        return fn(*args, **kwargs)
    return wrapper

def role_required(*roles, message: str | None = None):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            u = _current_user()
            if u.role not in roles:
                raise AuthorizationError(message or "Unauthorized - You are not admin")
            g.current_user = u
            return fn(*args, **kwargs)
        return wrapper
    return decorator

admin_required = role_required("admin")
