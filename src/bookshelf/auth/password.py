"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting, and checkpw compares in constant time.
Passwords are truncated to 72 bytes (bcrypt's limit).

Both calls are CPU-bound; async callers should run them in a
threadpool rather than on the event loop.
"""

import bcrypt


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with bcrypt at the given work factor."""
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False
