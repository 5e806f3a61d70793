from sqlalchemy.orm import Session

from core.security import hash_password
from models.user import Account, CREDENTIAL_PROVIDER, User, UserRole


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_users(db: Session, skip: int = 0, limit: int = 100):
    return db.query(User).order_by(User.created_at.desc()).offset(skip).limit(limit).all()


def count_admins(db: Session) -> int:
    return db.query(User).filter(User.role == UserRole.ADMIN).count()


def create_user(
    db: Session,
    email: str,
    password: str,
    name: str | None = None,
    role: UserRole = UserRole.SUBSCRIBER,
    is_active: bool = True,
) -> User:
    user = User(email=normalize_email(email), name=name, role=role, is_active=is_active)
    user.accounts.append(
        Account(provider_id=CREDENTIAL_PROVIDER, password_hash=hash_password(password))
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_password(db: Session, user: User, password: str) -> None:
    account = user.credential_account
    if account is None:
        account = Account(provider_id=CREDENTIAL_PROVIDER)
        user.accounts.append(account)
    account.password_hash = hash_password(password)


def update_user(db: Session, user: User, changes: dict) -> User:
    password = changes.pop("password", None)
    if password:
        set_password(db, user, password)
    if "email" in changes and changes["email"]:
        changes["email"] = normalize_email(changes["email"])
    for key, value in changes.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()
