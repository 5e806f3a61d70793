import json

from sqlalchemy.orm import Session

from db.database import utcnow
from models.subscriber import Subscriber, SubscriberStatus
from schemas.subscriber import SubscriberUpdate


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_subscriber(db: Session, subscriber_id: int) -> Subscriber | None:
    return db.query(Subscriber).filter(Subscriber.id == subscriber_id).first()


def get_subscriber_by_email(db: Session, email: str) -> Subscriber | None:
    return db.query(Subscriber).filter(Subscriber.email == normalize_email(email)).first()


def get_subscribers(db: Session, status: SubscriberStatus | None = None):
    query = db.query(Subscriber)
    if status is not None:
        query = query.filter(Subscriber.status == status)
    return query.order_by(Subscriber.subscribed_at.desc(), Subscriber.id.desc()).all()


def create_subscriber(db: Session, email: str, name: str | None = None) -> Subscriber:
    subscriber = Subscriber(
        email=normalize_email(email),
        name=name.strip() if name and name.strip() else None,
        status=SubscriberStatus.ACTIVE,
        tags="[]",
    )
    db.add(subscriber)
    db.commit()
    db.refresh(subscriber)
    return subscriber


def subscribe(db: Session, email: str, name: str | None = None) -> tuple[Subscriber, str]:
    """Create or reactivate a subscriber.

    Returns the subscriber and one of ``"created"``, ``"reactivated"`` or
    ``"existing"``.
    """
    subscriber = get_subscriber_by_email(db, email)
    if subscriber is None:
        return create_subscriber(db, email, name), "created"
    if subscriber.status == SubscriberStatus.ACTIVE:
        return subscriber, "existing"
    subscriber.status = SubscriberStatus.ACTIVE
    subscriber.subscribed_at = utcnow()
    if name and name.strip():
        subscriber.name = name.strip()
    db.commit()
    db.refresh(subscriber)
    return subscriber, "reactivated"


def unsubscribe(db: Session, subscriber: Subscriber) -> Subscriber:
    subscriber.status = SubscriberStatus.UNSUBSCRIBED
    db.commit()
    db.refresh(subscriber)
    return subscriber


def update_subscriber(db: Session, subscriber: Subscriber, changes: SubscriberUpdate) -> Subscriber:
    data = changes.model_dump(exclude_unset=True)
    if "tags" in data:
        data["tags"] = json.dumps(data["tags"] or [])
    for key, value in data.items():
        setattr(subscriber, key, value)
    db.commit()
    db.refresh(subscriber)
    return subscriber


def delete_subscriber(db: Session, subscriber: Subscriber) -> None:
    db.delete(subscriber)
    db.commit()
