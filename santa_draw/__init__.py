from __future__ import annotations

import os
from flask import Flask

from .extensions import db, login_manager, migrate, csrf
from .security import hash_admin_password
from .services.derangement import DEFAULT_MAX_ATTEMPTS
from .store import SqlAlchemyStore
from .views.admin import admin_bp
from .views.api import api_bp
from .views.public import public_bp
from .views.responses import register_error_handlers


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__)

    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", "sqlite:///secretsanta.db")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["SESSION_COOKIE_SAMESITE"] = "Strict"
    app.config["ASSIGNMENT_ENC_KEY"] = os.environ.get("ASSIGNMENT_ENC_KEY", "").strip()
    app.config["SANTA_MAX_DRAW_ATTEMPTS"] = int(os.environ.get("SANTA_MAX_DRAW_ATTEMPTS", DEFAULT_MAX_ATTEMPTS))
    app.config["LOG_LEVEL"] = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Organizer password: either a ready argon2 hash or a plaintext value hashed here.
    app.config["SANTA_ADMIN_PASSWORD_HASH"] = os.environ.get("SANTA_ADMIN_PASSWORD_HASH", "").strip()
    app.config["SANTA_ADMIN_PASSWORD"] = os.environ.get("SANTA_ADMIN_PASSWORD", "")

    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    if not app.config["SANTA_ADMIN_PASSWORD_HASH"] and app.config["SANTA_ADMIN_PASSWORD"]:
        app.config["SANTA_ADMIN_PASSWORD_HASH"] = hash_admin_password(app.config["SANTA_ADMIN_PASSWORD"])
    app.config.pop("SANTA_ADMIN_PASSWORD", None)
    if not app.config["SANTA_ADMIN_PASSWORD_HASH"]:
        app.logger.warning("No SANTA_ADMIN_PASSWORD configured; admin actions are disabled")

    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    app.extensions["santa_store"] = SqlAlchemyStore()

    # Blueprints
    app.register_blueprint(public_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(admin_bp)
    register_error_handlers(app)

    with app.app_context():
        db.create_all()

    return app
