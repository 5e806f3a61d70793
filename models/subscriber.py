from enum import Enum

from sqlalchemy import Column, DateTime, Enum as SqlEnum, Integer, String, Text

from db.database import Base, utcnow


class SubscriberStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    UNSUBSCRIBED = "unsubscribed"


class Subscriber(Base):
    __tablename__ = "subscribers"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    status = Column(
        SqlEnum(SubscriberStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SubscriberStatus.ACTIVE,
    )
    subscribed_at = Column(DateTime, default=utcnow)
    last_email_sent = Column(DateTime, nullable=True)
    tags = Column(Text, nullable=False, default="[]")  # JSON list
