from __future__ import annotations

import threading

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db
from .models import Participant, AssignmentState
from .security import encrypt_assignment_recipient, decrypt_assignment_recipient
from .services.draw import DrawState


class StoreError(RuntimeError):
    pass


class SqlAlchemyStore:
    """
    Loads and saves the whole DrawState through the Flask-SQLAlchemy session.

    Callers doing load -> change -> save must hold `lock`, so only one write
    sequence is in flight per process.
    """

    def __init__(self):
        self.lock = threading.Lock()

    def load(self) -> DrawState:
        try:
            people = Participant.query.order_by(Participant.id.asc()).all()
            state = AssignmentState.query.first()
            by_id = {p.id: p.name for p in people}

            results = {}
            if state is not None and state.is_drawn:
                for p in people:
                    if not p.assigned_to_ciphertext:
                        raise ValueError(f"Participant {p.id} has no stored assignment")
                    results[p.name] = by_id[decrypt_assignment_recipient(p.assigned_to_ciphertext)]
        except (SQLAlchemyError, ValueError, KeyError) as e:
            db.session.rollback()
            current_app.logger.exception("Failed to load draw state")
            raise StoreError("Could not load saved data.") from e

        return DrawState(
            participants=tuple(p.name for p in people),
            results=results,
            is_drawn=bool(state and state.is_drawn),
            drawn_at=state.run_at if state else None,
        )

    def save(self, state: DrawState) -> None:
        """Replace the persisted state with `state` in one transaction. Raises StoreError."""
        try:
            wanted = set(state.participants)
            existing = {p.name: p for p in Participant.query.all()}

            for name, p in existing.items():
                if name not in wanted:
                    db.session.delete(p)
            for name in state.participants:
                if name not in existing:
                    db.session.add(Participant(name=name))
            db.session.flush()

            by_name = {p.name: p for p in Participant.query.all()}
            for name in state.participants:
                receiver = state.results.get(name) if state.is_drawn else None
                by_name[name].assigned_to_ciphertext = (
                    encrypt_assignment_recipient(by_name[receiver].id) if receiver else None
                )

            row = AssignmentState.get_singleton()
            row.is_drawn = state.is_drawn
            row.run_at = state.drawn_at
            db.session.commit()
        except (SQLAlchemyError, KeyError) as e:
            db.session.rollback()
            current_app.logger.exception("Failed to save draw state")
            raise StoreError("Could not save data. Please try again.") from e


def get_store() -> SqlAlchemyStore:
    return current_app.extensions["santa_store"]
