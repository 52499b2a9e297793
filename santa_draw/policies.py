from __future__ import annotations

from flask.views import MethodView
from flask_login import current_user

from .views.responses import fail


def is_admin_user() -> bool:
    # AdminUser is the only identity login_manager can load.
    return current_user.is_authenticated


class AdminRequiredMixin(MethodView):
    def dispatch_request(self, *args, **kwargs):
        if not is_admin_user():
            return fail("Admin login required.", 401)
        return super().dispatch_request(*args, **kwargs)
