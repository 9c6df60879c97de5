# --- storefront/__init__.py ---
from flask import Flask, jsonify

from .config import Config
from .extensions import db, jwt, cors, migrate
from .utils.api import api_error

def _register_jwt_handlers():
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify(api_error("Unauthorized - Missing or invalid token")), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify(api_error("Unauthorized - Invalid token")), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify(api_error("Unauthorized - Token has expired")), 401

def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)

    config_object = config_object or Config
    app.config.from_object(config_object)
    config_object.init_app(app)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": "*"}})
    migrate.init_app(app, db)
    _register_jwt_handlers()

    from .errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from .auth import bp as auth_bp; app.register_blueprint(auth_bp)
    from .product import bp as product_bp; app.register_blueprint(product_bp)
    from .coupon import bp as coupon_bp; app.register_blueprint(coupon_bp)
    from .cart import bp as cart_bp; app.register_blueprint(cart_bp)
    from .order import bp as order_bp; app.register_blueprint(order_bp)
    from .enquiry import bp as enquiry_bp; app.register_blueprint(enquiry_bp)

    from .cli import register_cli
    register_cli(app)

    @app.get("/")
    def health():
        return jsonify(success=True, message="API running", data=[])

    with app.app_context():
        from . import model  # noqa: F401
        db.create_all()

    app.logger.info("storefront ready: %s", sorted(app.blueprints.keys()))
    return app
