from __future__ import annotations

from flask import Flask, jsonify, current_app
from werkzeug.exceptions import HTTPException

from ..services.draw import SantaError
from ..store import StoreError


def ok(data=None, message: str | None = None, status: int = 200):
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(SantaError)
    def handle_santa_error(e: SantaError):
        return fail(str(e), e.status_code)

    @app.errorhandler(StoreError)
    def handle_store_error(e: StoreError):
        return fail(str(e), 500)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        if e.code == 404:
            return fail("No such API endpoint.", 404)
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        current_app.logger.exception("Unhandled error")
        return fail("Internal server error.", 500)
