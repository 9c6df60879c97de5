from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token
from sqlalchemy import or_
from . import bp
from ..model import User
from ..extensions import db
from ..errors import AuthorizationError, ConflictError, ValidationError
from ..services import user_service
from ..utils.api import ok
from ..utils.decorators import admin_required, current_user, login_required
from ..utils.request import json_body

REQUIRED = ("firstName", "lastName", "mobile", "email", "password")


@bp.post("/register")
def register():
    data = json_body()
    values = {k: (data.get(k) or "").strip() if isinstance(data.get(k), str) else "" for k in REQUIRED}
    if not all(values.values()):
        raise ValidationError("All fields (firstName, lastName, mobile, email, password) are required")
    email = values["email"].lower()
    if len(values["password"]) < 6:
        raise ValidationError("Password required, min 6 chars")

    if User.query.filter(or_(User.email == email, User.mobile == values["mobile"])).first():
        raise ConflictError("User already exists")

    # Bootstrap: very first account becomes admin
    is_first_user = db.session.query(User.id).count() == 0
    user = User(
        first_name=values["firstName"],
        last_name=values["lastName"],
        mobile=values["mobile"],
        email=email,
        password_hash=generate_password_hash(values["password"]),
        role="admin" if is_first_user else "user",
    )
    db.session.add(user)
    db.session.commit()
    return ok("User created successfully", user.as_dict(), status=201)

@bp.post("/login")
def login():
    data = json_body()
    email = data.get("email")
    email = email.strip().lower() if isinstance(email, str) else ""
    password = data.get("password")
    if not email or not isinstance(password, str) or not password:
        raise ValidationError("Email and password are required")

    user = User.query.filter_by(email=email).first()
    if not user or not check_password_hash(user.password_hash, password):
        raise AuthorizationError("Invalid email or password")
    if user.is_blocked:
        raise AuthorizationError("User is blocked")

    token = create_access_token(identity=str(user.id))
    return ok("You've logged in successfully", {"user": user.as_dict(), "token": token})

@bp.get("/me")
@login_required
def me():
    return ok("current user", current_user().as_dict())

# ---- own profile -----------------------------------------------------------

@bp.put("/edit")
@login_required
def edit_profile():
    u = user_service.update_user(current_user().id, json_body())
    return ok(f"User {u.first_name} Updated", u.as_dict())

@bp.put("/save-address")
@login_required
def save_address():
    """Body: { "address": str }"""
    u = user_service.save_address(current_user().id, json_body().get("address"))
    return ok(f"User {u.first_name} Update Address", u.as_dict())

@bp.get("/wishlist")
@login_required
def get_wishlist():
    user = current_user()
    products = user_service.wishlist_products(user)
    return ok(f"User {user.first_name} wishlist", [p.as_api() for p in products])

# ---- admin user management -------------------------------------------------

@bp.get("")
@admin_required
def list_users():
    return ok("All users", [u.as_dict() for u in user_service.list_users()])

@bp.get("/<int:user_id>")
@admin_required
def get_user(user_id: int):
    u = user_service.get_user(user_id)
    return ok(f"User {u.first_name} info", u.as_dict())

@bp.put("/<int:user_id>")
@admin_required
def update_user(user_id: int):
    u = user_service.update_user(user_id, json_body(), allow_role=True)
    return ok(f"User {u.first_name} Updated", u.as_dict())

@bp.delete("/<int:user_id>")
@admin_required
def delete_user(user_id: int):
    payload = user_service.delete_user(user_id)
    return ok(f"User {payload['firstName']} Deleted", payload)

@bp.put("/block/<int:user_id>")
@admin_required
def block_user(user_id: int):
    if user_id == current_user().id:
        raise ValidationError("You cannot block yourself")
    u = user_service.set_blocked(user_id, True)
    return ok(f"User {u.first_name} blocked", u.as_dict())

@bp.put("/unblock/<int:user_id>")
@admin_required
def unblock_user(user_id: int):
    u = user_service.set_blocked(user_id, False)
    return ok(f"User {u.first_name} Unblocked", u.as_dict())
