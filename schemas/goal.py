from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.common import CleanText, Money, StrippedStr, not_null


class GoalBase(BaseModel):
    title: StrippedStr = Field(min_length=1, max_length=200)
    description: Optional[CleanText] = Field(default=None, max_length=1000)
    target_amount: Money = Field(ge=1, le=1_000_000)
    deadline: Optional[datetime] = None


class GoalCreate(GoalBase):
    pass


class GoalUpdate(BaseModel):
    title: Optional[StrippedStr] = Field(default=None, min_length=1, max_length=200)
    description: Optional[CleanText] = Field(default=None, max_length=1000)
    target_amount: Optional[Money] = Field(default=None, ge=1, le=1_000_000)
    deadline: Optional[datetime] = None

    @field_validator("title", "target_amount")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class GoalResponse(GoalBase):
    id: int
    current_amount: Money
    completed: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
    donation_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class DonationCreate(BaseModel):
    amount: Money = Field(ge=1, le=100_000)
    donor_name: Optional[CleanText] = Field(default=None, max_length=100)
    message: Optional[CleanText] = Field(default=None, max_length=500)
    anonymous: bool = False
    goal_id: Optional[int] = None


class DonationResponse(BaseModel):
    id: int
    amount: Money
    donor_name: Optional[str] = None
    message: Optional[str] = None
    anonymous: bool
    goal_id: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminDonationResponse(DonationResponse):
    goal_title: Optional[str] = None


class DonationList(BaseModel):
    donations: list[AdminDonationResponse]
    total: int
    total_amount: Money = Decimal("0")
