import json
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from models.subscriber import SubscriberStatus
from schemas.common import not_null


class SubscribeRequest(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(default=None, max_length=100)


class UnsubscribeRequest(BaseModel):
    id: Optional[int] = None
    email: Optional[EmailStr] = None


class SubscriberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    status: Optional[SubscriberStatus] = None
    tags: Optional[list[str]] = None

    @field_validator("status")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class SubscriberResponse(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    status: SubscriberStatus
    subscribed_at: datetime
    last_email_sent: Optional[datetime] = None
    tags: list[str] = []

    model_config = ConfigDict(from_attributes=True)

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, value):
        if isinstance(value, str):
            return json.loads(value or "[]")
        return value or []
