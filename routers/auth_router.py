"""Email/password sign-in with server-side sessions.

Subscriber accounts are newsletter identities and may not hold a session. The
role is checked before the password is verified and again once the session
exists, so a role change between the two checks still cannot leave a
subscriber signed in.
"""
import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

import crud.auth_sessions as sessions
import crud.users as users
from core.auth import clear_session_cookies, get_current_user, read_session_token, set_session_cookie
from core.config import settings
from core.errors import AccessDenied, AccountInactive, InvalidCredentials, ValidationFailed
from core.rate_limit import get_client_ip, rate_limited
from core.security import password_problems, verify_password
from db.database import get_db
from models.user import User, UserRole
from schemas.user import (
    ForgotPasswordRequest,
    ResetPasswordRequest,
    SessionResponse,
    SignInRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

FORGOT_PASSWORD_MESSAGE = "If an account exists for that email, a reset link has been sent"


def check_sign_in_allowed(db: Session, email: str) -> None:
    """Reject subscribers and deactivated accounts before verifying credentials."""
    user = users.get_user_by_email(db, email)
    if user is None:
        return
    if user.role == UserRole.SUBSCRIBER:
        logger.warning("Sign-in denied for subscriber account %s", user.id)
        raise AccessDenied()
    if not user.is_active:
        logger.warning("Sign-in denied for deactivated account %s", user.id)
        raise AccountInactive("Account deactivated")


def session_role(db: Session, user_id: int) -> UserRole | None:
    """Role of the user as stored right now, read after the session is issued."""
    user = users.get_user(db, user_id)
    return user.role if user is not None else None


def authenticate(db: Session, email: str, password: str) -> User:
    user = users.get_user_by_email(db, email)
    account = user.credential_account if user is not None else None
    if account is None or not verify_password(password, account.password_hash):
        raise InvalidCredentials("Invalid email or password")
    return user


@router.post("/sign-in/email", response_model=SessionResponse, dependencies=[Depends(rate_limited("strict"))])
def sign_in(
    credentials: SignInRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    check_sign_in_allowed(db, credentials.email)
    user = authenticate(db, credentials.email, credentials.password)

    auth_session = sessions.create_session(
        db,
        user_id=user.id,
        max_age_seconds=settings.SESSION_MAX_AGE_SECONDS,
        ip_address=get_client_ip(request.headers),
        user_agent=request.headers.get("user-agent"),
    )
    if session_role(db, user.id) == UserRole.SUBSCRIBER:
        sessions.revoke_session(db, auth_session.token)
        logger.warning("Revoked session issued to subscriber account %s", user.id)
        raise AccessDenied()

    set_session_cookie(response, auth_session.token, user.id, auth_session.expires_at)
    logger.info("User %s signed in", user.id)
    return {"user": user, "expires_at": auth_session.expires_at}


@router.post("/sign-out")
def sign_out(request: Request, response: Response, db: Session = Depends(get_db)):
    token = read_session_token(request)
    if token is not None:
        sessions.revoke_session(db, token)
    clear_session_cookies(response)
    return {"success": True}


@router.get("/session", response_model=UserResponse)
def read_session(user: User = Depends(get_current_user)):
    return user


@router.post("/forgot-password", dependencies=[Depends(rate_limited("passwordReset"))])
def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db)):
    # same answer whether or not the account exists
    user = users.get_user_by_email(db, payload.email)
    if user is not None and user.is_active and user.role != UserRole.SUBSCRIBER:
        verification = sessions.create_verification(
            db, identifier=user.email, ttl_seconds=settings.PASSWORD_RESET_TTL_SECONDS
        )
        reset_url = f"{settings.SITE_URL}/admin/reset-password?token={verification.token}"
        logger.info("Password reset requested for user %s: %s", user.id, reset_url)
    return {"message": FORGOT_PASSWORD_MESSAGE}


@router.post("/reset-password")
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    problems = password_problems(payload.new_password)
    if problems:
        raise ValidationFailed("; ".join(problems))
    email = sessions.consume_verification(db, payload.token)
    user = users.get_user_by_email(db, email) if email else None
    if user is None:
        raise ValidationFailed("Invalid or expired reset token")
    users.update_user(db, user, {"password": payload.new_password})
    revoked = sessions.revoke_user_sessions(db, user.id)
    logger.info("Password reset for user %s; %d sessions revoked", user.id, revoked)
    return {"message": "Password has been reset"}
