import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

import crud.subscribers as subscribers
import crud.users as users
from core.auth import require_admin, require_permissions
from core.config import settings
from core.errors import AccessDenied, Conflict, NotFound, ValidationFailed
from core.security import password_problems
from crud.donations import donation_totals
from db.database import get_db
from models.content import Post, PrayerRequest
from models.goal import Goal
from models.subscriber import Subscriber, SubscriberStatus
from models.user import User, UserRole
from schemas.content import Stats
from schemas.subscriber import SubscribeRequest, SubscriberResponse, SubscriberUpdate
from schemas.user import AdminSetupRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

# bootstrap has no admin to authenticate as yet
setup_router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/check-admin", response_model=UserResponse)
def check_admin(admin: User = Depends(require_admin)):
    return admin


@router.get("/stats", response_model=Stats, dependencies=[Depends(require_permissions("read:analytics"))])
def read_stats(db: Session = Depends(get_db)):
    total_donations, total_amount = donation_totals(db)
    return Stats(
        total_posts=db.query(func.count(Post.id)).scalar(),
        published_posts=db.query(func.count(Post.id)).filter(Post.published.is_(True)).scalar(),
        total_goals=db.query(func.count(Goal.id)).scalar(),
        active_goals=db.query(func.count(Goal.id)).filter(Goal.completed.is_(False)).scalar(),
        total_donations=total_donations,
        total_donation_amount=float(total_amount),
        total_subscribers=db.query(func.count(Subscriber.id))
        .filter(Subscriber.status == SubscriberStatus.ACTIVE)
        .scalar(),
        unread_prayer_requests=db.query(func.count(PrayerRequest.id))
        .filter(PrayerRequest.is_read.is_(False))
        .scalar(),
    )


# ---- Subscribers ----


def _get_subscriber(subscriber_id: int, db: Session):
    subscriber = subscribers.get_subscriber(db=db, subscriber_id=subscriber_id)
    if subscriber is None:
        raise NotFound("Subscriber not found")
    return subscriber


@router.get("/subscribers", response_model=List[SubscriberResponse])
def read_subscribers(status: Optional[SubscriberStatus] = None, db: Session = Depends(get_db)):
    return subscribers.get_subscribers(db=db, status=status)


@router.post("/subscribers", response_model=SubscriberResponse, status_code=201)
def create_subscriber(request: SubscribeRequest, db: Session = Depends(get_db)):
    if subscribers.get_subscriber_by_email(db=db, email=request.email) is not None:
        raise Conflict("Subscriber already exists")
    return subscribers.create_subscriber(db=db, email=request.email, name=request.name)


@router.patch("/subscribers/{subscriber_id}", response_model=SubscriberResponse)
def update_subscriber(subscriber_id: int, changes: SubscriberUpdate, db: Session = Depends(get_db)):
    return subscribers.update_subscriber(db=db, subscriber=_get_subscriber(subscriber_id, db), changes=changes)


@router.delete("/subscribers/{subscriber_id}")
def delete_subscriber(subscriber_id: int, db: Session = Depends(get_db)):
    subscribers.delete_subscriber(db=db, subscriber=_get_subscriber(subscriber_id, db))
    return {"message": "Subscriber deleted successfully"}


# ---- Bootstrap ----


@setup_router.post("/setup", response_model=UserResponse, status_code=201)
def setup_admin(request: AdminSetupRequest, db: Session = Depends(get_db)):
    """Create the first admin account on a fresh deployment."""
    if not settings.ALLOW_ADMIN_SETUP:
        raise AccessDenied("Admin setup is disabled")
    if users.count_admins(db) > 0:
        raise AccessDenied("An admin account already exists")

    password = request.password or settings.ADMIN_DEFAULT_PASSWORD
    if not password:
        raise ValidationFailed("A password is required")
    problems = password_problems(password)
    if problems:
        raise ValidationFailed("; ".join(problems))

    existing = users.get_user_by_email(db, request.email)
    if existing is not None:
        admin = users.update_user(
            db, existing, {"role": UserRole.ADMIN, "is_active": True, "password": password}
        )
    else:
        admin = users.create_user(
            db, email=request.email, password=password, name=request.name, role=UserRole.ADMIN
        )
    logger.warning("Bootstrap admin account %s created", admin.id)
    return admin
