import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import crud.subscribers as crud
from core.errors import NotFound, ValidationFailed
from core.rate_limit import rate_limited
from db.database import get_db
from schemas.subscriber import SubscribeRequest, UnsubscribeRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["subscribers"])

SUBSCRIBE_MESSAGES = {
    "created": "Successfully subscribed",
    "reactivated": "Welcome back! Your subscription has been reactivated",
    "existing": "You are already subscribed",
}


@router.post("/subscribe", dependencies=[Depends(rate_limited("subscribe"))])
def subscribe(request: SubscribeRequest, db: Session = Depends(get_db)):
    subscriber, outcome = crud.subscribe(db=db, email=request.email, name=request.name)
    if outcome != "existing":
        logger.info("Subscriber %s %s", subscriber.id, outcome)
    return {"message": SUBSCRIBE_MESSAGES[outcome], "status": outcome}


def _unsubscribe(db: Session, subscriber_id: Optional[int], email: Optional[str]):
    if subscriber_id is None and not email:
        raise ValidationFailed("Subscriber id or email is required")
    if subscriber_id is not None:
        subscriber = crud.get_subscriber(db=db, subscriber_id=subscriber_id)
    else:
        subscriber = crud.get_subscriber_by_email(db=db, email=email)
    if subscriber is None:
        raise NotFound("Subscriber not found")
    crud.unsubscribe(db=db, subscriber=subscriber)
    return {"message": "Successfully unsubscribed"}


@router.get("/unsubscribe")
def unsubscribe_link(id: Optional[int] = None, email: Optional[str] = None, db: Session = Depends(get_db)):
    """One-click unsubscribe target used in newsletter emails."""
    return _unsubscribe(db, id, email)


@router.post("/unsubscribe")
def unsubscribe(request: UnsubscribeRequest, db: Session = Depends(get_db)):
    return _unsubscribe(db, request.id, request.email)
