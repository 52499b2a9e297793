from datetime import datetime
from flask_login import UserMixin
from .extensions import db, login_manager
from .services.draw import MAX_NAME_LENGTH

ADMIN_USER_ID = "admin"


class Participant(db.Model):
    __tablename__ = "participants"

    # Autoincrement id doubles as registration order.
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(MAX_NAME_LENGTH), unique=True, nullable=False)
    registered_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Encrypted receiver id (Fernet token string). Null until a draw is stored.
    assigned_to_ciphertext = db.Column(db.Text, nullable=True)


class AssignmentState(db.Model):
    __tablename__ = "assignment_state"

    id = db.Column(db.Integer, primary_key=True)
    run_at = db.Column(db.DateTime, nullable=True)
    is_drawn = db.Column(db.Boolean, default=False, nullable=False)

    @classmethod
    def get_singleton(cls):
        """Return the single state row, adding one to the session if missing (caller commits)."""
        obj = cls.query.first()
        if not obj:
            obj = cls(is_drawn=False)
            db.session.add(obj)
        return obj


class AdminUser(UserMixin):
    """The organizer session. There is only one, authenticated by password."""

    def get_id(self):
        return ADMIN_USER_ID


@login_manager.user_loader
def load_user(user_id: str):
    if user_id == ADMIN_USER_ID:
        return AdminUser()
    return None
