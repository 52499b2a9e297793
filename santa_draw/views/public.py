from __future__ import annotations

from flask import Blueprint, jsonify
from flask.views import MethodView


public_bp = Blueprint("public", __name__)

ENDPOINTS = [
    "GET    /api/status",
    "POST   /api/register",
    "GET    /api/participants",
    "DELETE /api/participants/<name>",
    "POST   /api/draw",
    "DELETE /api/draw",
    "GET    /api/result/<name>",
    "DELETE /api/reset",
    "POST   /api/admin/verify",
    "POST   /api/admin/logout",
    "GET    /api/admin/cycles",
]


class LandingView(MethodView):
    def get(self):
        return jsonify({"success": True, "data": {"service": "secret-santa-draw", "endpoints": ENDPOINTS}})


public_bp.add_url_rule("/", view_func=LandingView.as_view("landing"))
