"""
taskgate.auth.passwords

Password hashing (bcrypt, used directly rather than through passlib).

bcrypt rejects secrets longer than 72 bytes; callers validate with
`check_password_length` before hashing or verifying.
"""

from __future__ import annotations

import bcrypt

MAX_PASSWORD_BYTES = 72


def check_password_length(plain: str) -> str:
    if len(plain.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes in UTF-8")
    return plain


def hash_password(plain: str, *, rounds: int = 10) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False
