"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and produces hashes starting with "$2b$".

db.json files written before hashing was added hold plaintext
passwords. Those are still verified (constant-time) and auto-upgraded to bcrypt
on successful login.
"""

import re
import secrets

import bcrypt

_BCRYPT_HASH = re.compile(r"^\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}$")


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt.

    Passwords are truncated to 72 bytes (bcrypt's limit).
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its stored value.

    Supports both bcrypt ($2b$...) and legacy plaintext values.
    Use needs_upgrade() to check if a value should be re-hashed.
    """
    if needs_upgrade(password_hash):
        return secrets.compare_digest(
            password.encode("utf-8"), password_hash.encode("utf-8")
        )
    try:
        pw_bytes = password.encode("utf-8")[:72]
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def needs_upgrade(password_hash: str) -> bool:
    """True for stored values that are not bcrypt hashes yet."""
    return _BCRYPT_HASH.match(password_hash) is None
