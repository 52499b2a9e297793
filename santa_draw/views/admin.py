from __future__ import annotations

from flask import Blueprint, request, current_app
from flask.views import MethodView
from flask_login import login_user, logout_user
from flask_wtf.csrf import generate_csrf

from ..extensions import csrf
from ..models import AdminUser
from ..policies import AdminRequiredMixin
from ..security import verify_admin_password
from ..services.draw import draw_cycle_lengths
from ..store import get_store
from .responses import ok, fail


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


class VerifyView(MethodView):
    def post(self):
        payload = request.get_json(silent=True) or {}
        password = payload.get("password")
        if not password or not isinstance(password, str):
            return fail("Password is required.", 400)

        if not verify_admin_password(password):
            current_app.logger.warning("Failed admin login from %s", request.remote_addr)
            return fail("Incorrect password.", 401)

        login_user(AdminUser())
        current_app.logger.info("Admin logged in from %s", request.remote_addr)
        # Admin-only requests must echo this back in the X-CSRFToken header.
        return ok({"csrfToken": generate_csrf()}, message="Logged in.")


class LogoutView(AdminRequiredMixin):
    def post(self):
        logout_user()
        return ok(message="Logged out.")


class CyclesView(AdminRequiredMixin):
    """
    Shape of the stored draw: how many gift circles there are and how long each one is.
    Names are not included, so the organizer can check the draw without spoiling it.
    """
    def get(self):
        lengths = draw_cycle_lengths(get_store().load())
        return ok({"cycleLengths": lengths, "count": len(lengths)})


admin_bp.add_url_rule("/verify", view_func=csrf.exempt(VerifyView.as_view("verify")), methods=["POST"])
admin_bp.add_url_rule("/logout", view_func=LogoutView.as_view("logout"), methods=["POST"])
admin_bp.add_url_rule("/cycles", view_func=CyclesView.as_view("cycles"))
