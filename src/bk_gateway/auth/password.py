"""Password hashing for staff accounts (bcrypt).

The ``bcrypt`` package is used directly; passlib does not support bcrypt >= 4.
"""

import bcrypt


def hash_password(plain: str) -> str:
    hashed_bytes: bytes = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt())
    return hashed_bytes.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """False for a wrong password and for a malformed stored hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
