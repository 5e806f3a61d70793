import re
import secrets
from datetime import datetime, timezone

import jwt
from passlib.hash import argon2

from core.config import settings

ALGORITHM = "HS256"

COMMON_PASSWORDS = {
    "password", "12345678", "qwerty", "admin", "letmein", "welcome",
    "monkey", "1234567890", "password123", "admin123", "password1",
    "welcome1", "welcome123", "admin1", "letmein123", "qwerty123",
    "abc123", "football", "iloveyou",
}
_SPECIAL = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


def hash_password(password: str) -> str:
    """Hash plain password with Argon2."""
    return argon2.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return argon2.verify(plain_password, hashed_password)
    except ValueError:
        # not an argon2 hash
        return False


def password_problems(password: str) -> list[str]:
    problems = []
    if not password or len(password) < 12:
        problems.append("Password must be at least 12 characters long")
    if not re.search(r"[a-z]", password or ""):
        problems.append("Password must contain at least one lowercase letter")
    if not re.search(r"[A-Z]", password or ""):
        problems.append("Password must contain at least one uppercase letter")
    if not re.search(r"[0-9]", password or ""):
        problems.append("Password must contain at least one number")
    if not _SPECIAL.search(password or ""):
        problems.append("Password must contain at least one special character (!@#$%^&* etc.)")
    if (password or "").lower() in COMMON_PASSWORDS:
        problems.append("Password is too common")
    return problems


def new_token() -> str:
    return secrets.token_urlsafe(32)


def encode_session_cookie(session_token: str, user_id: int, expires_at: datetime) -> str:
    payload = {
        "sid": session_token,
        "sub": str(user_id),
        "exp": expires_at.replace(tzinfo=timezone.utc),
        "type": "session",
    }
    return jwt.encode(payload, settings.AUTH_SECRET, algorithm=ALGORITHM)


def decode_session_cookie(value: str) -> dict | None:
    try:
        decoded = jwt.decode(value, settings.AUTH_SECRET, algorithms=[ALGORITHM])
    except jwt.InvalidTokenError:
        return None
    if decoded.get("type") != "session" or not decoded.get("sid"):
        return None
    return decoded
