from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from schemas.common import CleanText, StrippedStr, not_null

ContentType = Literal["text", "html", "markdown"]


class AuthorSummary(BaseModel):
    id: int
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TagResponse(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class PostCreate(BaseModel):
    title: StrippedStr = Field(min_length=1, max_length=200)
    content: StrippedStr = Field(min_length=1)
    excerpt: Optional[StrippedStr] = Field(default=None, max_length=500)
    published: bool = False
    tags: list[StrippedStr] = []


class PostUpdate(BaseModel):
    title: Optional[StrippedStr] = Field(default=None, min_length=1, max_length=200)
    content: Optional[StrippedStr] = Field(default=None, min_length=1)
    excerpt: Optional[StrippedStr] = Field(default=None, max_length=500)
    published: Optional[bool] = None
    tags: Optional[list[StrippedStr]] = None

    @field_validator("title", "content", "published")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class PostResponse(BaseModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    published: bool
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    author: Optional[AuthorSummary] = None
    tags: list[TagResponse] = []

    model_config = ConfigDict(from_attributes=True)


class PostList(BaseModel):
    posts: list[PostResponse]
    total: int
    page: int
    take: int


class CommentCreate(BaseModel):
    content: CleanText = Field(min_length=1, max_length=2000)
    parent_id: Optional[int] = None


class CommentUpdate(BaseModel):
    is_approved: Optional[bool] = None
    content: Optional[CleanText] = Field(default=None, min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    id: int
    content: str
    is_approved: bool
    post_id: int
    parent_id: Optional[int] = None
    created_at: datetime
    author: Optional[AuthorSummary] = None

    model_config = ConfigDict(from_attributes=True)


class PostDetail(PostResponse):
    comments: list[CommentResponse] = []


class PrayerRequestCreate(BaseModel):
    name: Optional[CleanText] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    request: CleanText = Field(min_length=1, max_length=2000)
    is_private: bool = True


class PrayerRequestUpdate(BaseModel):
    is_read: bool


class PrayerRequestResponse(BaseModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    request: str
    is_private: bool
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PrayerRequestReceipt(BaseModel):
    id: int
    created_at: datetime
    message: str = "Prayer request submitted successfully"

    model_config = ConfigDict(from_attributes=True)


class SiteContentUpsert(BaseModel):
    key: StrippedStr = Field(min_length=1)
    page: StrippedStr = Field(min_length=1)
    section: StrippedStr = Field(min_length=1)
    title: Optional[str] = None
    content: str = ""
    content_type: ContentType = "text"
    order: int = 0


class SiteContentResponse(SiteContentUpsert):
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Stats(BaseModel):
    total_posts: int
    published_posts: int
    total_goals: int
    active_goals: int
    total_donations: int
    total_donation_amount: float
    total_subscribers: int
    unread_prayer_requests: int
