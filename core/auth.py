"""Session-cookie authentication and the role/permission gates for routes."""
import logging
from datetime import datetime

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from core.config import settings
from core.errors import AccountInactive, InsufficientPermission, InsufficientRole, Unauthenticated
from core.rbac import has_permission
from core.security import decode_session_cookie, encode_session_cookie
from crud.auth_sessions import get_active_session
from db.database import get_db
from models.user import User, UserRole

logger = logging.getLogger(__name__)

SESSION_COOKIE = "kylee.session_token"
SECURE_SESSION_COOKIE = "__Secure-kylee.session_token"
LEGACY_SESSION_COOKIES = ("kylee.sessionToken",)


def session_cookie_name() -> str:
    return SECURE_SESSION_COOKIE if settings.secure_cookies else SESSION_COOKIE


def set_session_cookie(response: Response, session_token: str, user_id: int, expires_at: datetime) -> None:
    response.set_cookie(
        key=session_cookie_name(),
        value=encode_session_cookie(session_token, user_id, expires_at),
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
    )


def clear_session_cookies(response: Response) -> None:
    """Expire every name the session cookie may have been written under."""
    for name in (SESSION_COOKIE, SECURE_SESSION_COOKIE, *LEGACY_SESSION_COOKIES):
        for secure in (False, True):
            response.delete_cookie(key=name, path="/", secure=secure, httponly=True, samesite="lax")


def read_session_token(request: Request) -> str | None:
    """Return the server-side session token referenced by the request cookie."""
    for name in (SECURE_SESSION_COOKIE, SESSION_COOKIE):
        value = request.cookies.get(name)
        if not value:
            continue
        payload = decode_session_cookie(value)
        if payload is not None:
            return payload["sid"]
    return None


def get_current_user_optional(request: Request, db: Session = Depends(get_db)) -> User | None:
    token = read_session_token(request)
    if token is None:
        return None
    session = get_active_session(db, token)
    if session is None:
        return None
    return session.user


def get_current_user(user: User | None = Depends(get_current_user_optional)) -> User:
    if user is None:
        raise Unauthenticated()
    return user


def require_active_user(user: User = Depends(get_current_user)) -> User:
    if not user.is_active:
        raise AccountInactive()
    return user


def require_admin(user: User | None = Depends(get_current_user_optional)) -> User:
    if user is None:
        raise Unauthenticated()
    if not user.is_active:
        logger.info("Inactive account %s attempted admin access", user.id)
        raise AccountInactive()
    if user.role != UserRole.ADMIN:
        logger.warning("User %s with role %s attempted admin access", user.id, user.role.value)
        raise InsufficientRole()
    return user


def require_permissions(*permissions: str):
    """Dependency factory: the active user must hold every listed permission."""

    def dependency(user: User = Depends(require_active_user)) -> User:
        missing = [p for p in permissions if not has_permission(user.role, p)]
        if missing:
            logger.warning("User %s lacks permissions %s", user.id, ", ".join(missing))
            raise InsufficientPermission()
        return user

    return dependency
