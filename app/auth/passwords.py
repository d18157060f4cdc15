# =============================================================================
# app/auth/passwords.py - Password Hashing
# =============================================================================
# bcrypt hashing for artist and customer passwords.
# =============================================================================

import hashlib

import bcrypt

from app.config import settings
from app.exceptions import WeakPasswordError

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    """Hash a plaintext password; the salt is embedded in the result."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a plaintext password against a stored hash. Missing hashes never match."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def password_fingerprint(password_hash: str | None) -> str:
    """Short digest of the stored hash; changes whenever the password does."""
    return hashlib.sha256((password_hash or "").encode("utf-8")).hexdigest()[:16]


def validate_password(password: str) -> None:
    """
    Enforce the minimum password length.

    Raises:
        WeakPasswordError: If the password is too short
    """
    if len(password or "") < settings.MIN_PASSWORD_LENGTH:
        raise WeakPasswordError(settings.MIN_PASSWORD_LENGTH)
