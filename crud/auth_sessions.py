from datetime import timedelta

from sqlalchemy.orm import Session

from core.security import new_token
from db.database import utcnow
from models.user import AuthSession, Verification


def create_session(
    db: Session,
    user_id: int,
    max_age_seconds: int,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> AuthSession:
    session = AuthSession(
        token=new_token(),
        user_id=user_id,
        expires_at=utcnow() + timedelta(seconds=max_age_seconds),
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_active_session(db: Session, token: str) -> AuthSession | None:
    return (
        db.query(AuthSession)
        .filter(AuthSession.token == token, AuthSession.expires_at > utcnow())
        .first()
    )


def revoke_session(db: Session, token: str) -> bool:
    deleted = db.query(AuthSession).filter(AuthSession.token == token).delete()
    db.commit()
    return deleted > 0


def revoke_user_sessions(db: Session, user_id: int) -> int:
    deleted = db.query(AuthSession).filter(AuthSession.user_id == user_id).delete()
    db.commit()
    return deleted


def create_verification(db: Session, identifier: str, ttl_seconds: int) -> Verification:
    # one outstanding token per identifier
    db.query(Verification).filter(Verification.identifier == identifier).delete()
    verification = Verification(
        identifier=identifier,
        token=new_token(),
        expires_at=utcnow() + timedelta(seconds=ttl_seconds),
    )
    db.add(verification)
    db.commit()
    db.refresh(verification)
    return verification


def consume_verification(db: Session, token: str) -> str | None:
    """Delete the token and return its identifier if it was still valid."""
    verification = db.query(Verification).filter(Verification.token == token).first()
    if verification is None:
        return None
    identifier = verification.identifier
    valid = verification.expires_at > utcnow()
    db.delete(verification)
    db.commit()
    return identifier if valid else None
