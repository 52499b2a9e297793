from __future__ import annotations

from flask import Blueprint, request, current_app
from flask.views import MethodView

from ..extensions import csrf
from ..policies import AdminRequiredMixin
from ..services.draw import (
    DrawFailed,
    clear_draw,
    register_participant,
    remove_participant,
    reset_state,
    result_for,
    run_draw,
)
from ..store import get_store
from .responses import ok


api_bp = Blueprint("api", __name__, url_prefix="/api")


def _iso(dt):
    return dt.isoformat() + "Z" if dt else None


class StatusView(MethodView):
    def get(self):
        state = get_store().load()
        return ok({
            "totalParticipants": len(state.participants),
            "isDrawn": state.is_drawn,
            "drawnAt": _iso(state.drawn_at),
            "participants": list(state.participants),
        })


class RegisterView(MethodView):
    def post(self):
        payload = request.get_json(silent=True) or {}
        name = payload.get("name")
        if name is not None and not isinstance(name, str):
            name = None

        store = get_store()
        with store.lock:
            state = register_participant(store.load(), name)
            store.save(state)

        name = state.participants[-1]
        current_app.logger.info("Registered participant %r (%d total)", name, len(state.participants))
        return ok(
            {"name": name, "totalParticipants": len(state.participants)},
            message="Registered.",
            status=201,
        )


class ParticipantsView(MethodView):
    def get(self):
        state = get_store().load()
        return ok({"participants": list(state.participants), "count": len(state.participants)})


class DeleteParticipantView(AdminRequiredMixin):
    def delete(self, name: str):
        store = get_store()
        with store.lock:
            state = remove_participant(store.load(), name)
            store.save(state)

        current_app.logger.info("Removed participant %r", name)
        return ok({"remainingParticipants": len(state.participants)}, message="Participant removed.")


class DrawView(AdminRequiredMixin):
    def post(self):
        store = get_store()
        with store.lock:
            previous = store.load()
            try:
                state = run_draw(previous, max_attempts=current_app.config["SANTA_MAX_DRAW_ATTEMPTS"])
            except DrawFailed:
                current_app.logger.warning(
                    "Draw failed for %d participants; keeping previous state", len(previous.participants)
                )
                raise
            store.save(state)

        current_app.logger.info("Draw completed for %d participants", len(state.participants))
        return ok(
            {"totalPairs": len(state.participants), "drawnAt": _iso(state.drawn_at)},
            message="Draw complete.",
        )

    def delete(self):
        store = get_store()
        with store.lock:
            store.save(clear_draw(store.load()))

        current_app.logger.info("Draw cleared; registration reopened")
        return ok(message="Draw cleared. Participants can register again and the draw can be rerun.")


class ResultView(MethodView):
    def get(self, name: str):
        receiver = result_for(get_store().load(), name)
        return ok({"giver": name, "receiver": receiver})


class ResetView(AdminRequiredMixin):
    def delete(self):
        store = get_store()
        with store.lock:
            store.save(reset_state())

        current_app.logger.info("All participants and results were reset")
        return ok(message="Everything has been reset.")


api_bp.add_url_rule("/status", view_func=StatusView.as_view("status"))
api_bp.add_url_rule("/register", view_func=csrf.exempt(RegisterView.as_view("register")), methods=["POST"])
api_bp.add_url_rule("/participants", view_func=ParticipantsView.as_view("participants"))
api_bp.add_url_rule(
    "/participants/<path:name>",
    view_func=DeleteParticipantView.as_view("delete_participant"),
    methods=["DELETE"],
)
api_bp.add_url_rule("/draw", view_func=DrawView.as_view("draw"), methods=["POST", "DELETE"])
api_bp.add_url_rule("/result/<path:name>", view_func=ResultView.as_view("result"))
api_bp.add_url_rule("/reset", view_func=ResetView.as_view("reset"), methods=["DELETE"])
