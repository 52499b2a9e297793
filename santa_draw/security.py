from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken
from flask import current_app
from passlib.context import CryptContext


pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)


def hash_admin_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_admin_password(password: str) -> bool:
    """Check password against SANTA_ADMIN_PASSWORD_HASH. Always False when no hash is configured."""
    stored_hash = current_app.config.get("SANTA_ADMIN_PASSWORD_HASH") or ""
    if not stored_hash or not password:
        return False
    try:
        return pwd_context.verify(password, stored_hash)
    except ValueError:
        current_app.logger.error("SANTA_ADMIN_PASSWORD_HASH is not a valid password hash")
        return False


# ---------------------------------------------------------------------------
# Assignment encryption-at-rest
#
# The receiver's participant id is encrypted before it is persisted, so the
# draw cannot be read back by casual DB inspection.
#
# NOTE: anyone holding ASSIGNMENT_ENC_KEY or SECRET_KEY can still decrypt.
# ---------------------------------------------------------------------------


def _assignment_fernet() -> Fernet:
    """Returns a Fernet instance keyed by ASSIGNMENT_ENC_KEY or derived from SECRET_KEY."""
    explicit = (current_app.config.get("ASSIGNMENT_ENC_KEY") or "").strip()
    if explicit:
        # Expect a urlsafe base64-encoded 32-byte key.
        return Fernet(explicit.encode("utf-8"))

    secret = (current_app.config.get("SECRET_KEY") or "").encode("utf-8")
    digest = hashlib.sha256(b"secretsanta-assignments|" + secret).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def encrypt_assignment_recipient(receiver_id: int) -> str:
    """Encrypt receiver_id -> ciphertext token (string)."""
    f = _assignment_fernet()
    token = f.encrypt(str(int(receiver_id)).encode("utf-8"))
    return token.decode("utf-8")


def decrypt_assignment_recipient(token: str) -> int:
    """Decrypt ciphertext token -> receiver_id (int). Raises ValueError on failure."""
    try:
        f = _assignment_fernet()
        raw = f.decrypt(token.encode("utf-8"))
        return int(raw.decode("utf-8"))
    except (InvalidToken, ValueError, TypeError) as e:
        raise ValueError("Invalid assignment token") from e
