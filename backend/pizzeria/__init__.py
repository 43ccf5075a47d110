# backend/pizzeria/__init__.py
import atexit

from flask import Flask, request

from .config import Config
from .extensions import db, migrate
from .time_utils import parse_time_of_day


def create_app(config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.products import products_bp
    from .routes.cart import cart_bp
    from .routes.coupons import coupons_bp
    from .routes.orders import orders_bp
    from .routes.users import users_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(coupons_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(users_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin and origin == app.config["FRONTEND_URL"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    if app.config["INVENTORY_RESET_ENABLED"] and not app.testing:
        start_inventory_reset_scheduler(app)

    return app


def start_inventory_reset_scheduler(app: Flask):
    """Start the daily reset thread and stop it when the process exits."""
    from .services.scheduler import InventoryResetScheduler

    scheduler = InventoryResetScheduler(app, parse_time_of_day(app.config["INVENTORY_RESET_TIME"]))
    scheduler.start()
    app.extensions["inventory_reset_scheduler"] = scheduler
    atexit.register(scheduler.stop)
    return scheduler
