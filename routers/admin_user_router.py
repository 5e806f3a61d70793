import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import crud.auth_sessions as sessions
import crud.users as crud
from core.auth import require_admin, require_permissions
from core.errors import Conflict, NotFound, ValidationFailed
from core.security import password_problems, verify_password
from db.database import get_db
from models.user import User
from schemas.user import ProfileUpdate, UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["admin"], dependencies=[Depends(require_admin)])


def _check_password(password: str) -> None:
    problems = password_problems(password)
    if problems:
        raise ValidationFailed("; ".join(problems))


def _get_user(user_id: int, db: Session) -> User:
    user = crud.get_user(db=db, user_id=user_id)
    if user is None:
        raise NotFound("User not found")
    return user


@router.get("", response_model=List[UserResponse])
def read_users(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud.get_users(db=db, skip=skip, limit=limit)


@router.post("", response_model=UserResponse, status_code=201, dependencies=[Depends(require_permissions("write:users"))])
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    if crud.get_user_by_email(db=db, email=user.email) is not None:
        raise Conflict("A user with this email already exists")
    _check_password(user.password)
    return crud.create_user(
        db=db,
        email=user.email,
        password=user.password,
        name=user.name,
        role=user.role,
        is_active=user.is_active,
    )


@router.get("/me", response_model=UserResponse)
def read_me(admin: User = Depends(require_admin)):
    return admin


@router.patch("/me", response_model=UserResponse)
def update_me(profile: ProfileUpdate, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    changes = profile.model_dump(exclude_unset=True)
    current_password = changes.pop("current_password", None)
    new_password = changes.pop("new_password", None)
    if new_password:
        account = admin.credential_account
        if not verify_password(current_password or "", account.password_hash if account else None):
            raise ValidationFailed("Current password is incorrect")
        _check_password(new_password)
        changes["password"] = new_password
    return crud.update_user(db=db, user=admin, changes=changes)


@router.get("/{user_id}", response_model=UserResponse)
def read_user(user_id: int, db: Session = Depends(get_db)):
    return _get_user(user_id, db)


@router.patch("/{user_id}", response_model=UserResponse, dependencies=[Depends(require_permissions("write:users"))])
def update_user(user_id: int, user: UserUpdate, db: Session = Depends(get_db)):
    db_user = _get_user(user_id, db)
    changes = user.model_dump(exclude_unset=True)
    email = changes.get("email")
    if email:
        other = crud.get_user_by_email(db=db, email=email)
        if other is not None and other.id != db_user.id:
            raise Conflict("Email is already in use")
    if changes.get("password"):
        _check_password(changes["password"])
    deactivated = changes.get("is_active") is False
    db_user = crud.update_user(db=db, user=db_user, changes=changes)
    if deactivated:
        revoked = sessions.revoke_user_sessions(db, db_user.id)
        logger.info("User %s deactivated; %d sessions revoked", db_user.id, revoked)
    return db_user


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    admin: User = Depends(require_permissions("delete:users")),
    db: Session = Depends(get_db),
):
    if user_id == admin.id:
        raise ValidationFailed("You cannot delete your own account")
    db_user = _get_user(user_id, db)
    if db_user.posts:
        raise Conflict("User has posts; reassign or delete them first")
    crud.delete_user(db=db, user=db_user)
    logger.info("User %s deleted by %s", user_id, admin.id)
    return {"message": "User deleted successfully"}
