from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import crud.content as crud
from core.auth import require_active_user
from core.errors import FeatureDisabled, NotFound, ValidationFailed
from core.rate_limit import rate_limited
from core.site_settings import SettingsCache, get_settings_cache
from db.database import get_db
from models.user import User
from schemas.content import CommentCreate, CommentResponse, PostDetail, PostList

router = APIRouter(prefix="/posts", tags=["posts"], dependencies=[Depends(rate_limited("posts"))])


def _published_post(slug: str, db: Session):
    db_post = crud.get_published_post(db=db, slug=slug)
    if db_post is None:
        raise NotFound("Post not found")
    return db_post


@router.get("", response_model=PostList)
def read_posts(
    take: int = Query(10, ge=1, le=50),
    page: int = Query(0, ge=0),
    tag: Optional[str] = None,
    db: Session = Depends(get_db),
):
    posts, total = crud.get_posts(
        db=db, skip=page * take, limit=take, published_only=True, tag=tag
    )
    return {"posts": posts, "total": total, "page": page, "take": take}


@router.get("/{slug}", response_model=PostDetail)
def read_post(slug: str, db: Session = Depends(get_db)):
    db_post = _published_post(slug, db)
    detail = PostDetail.model_validate(db_post)
    # only approved comments are public
    detail.comments = [c for c in detail.comments if c.is_approved]
    return detail


@router.post("/{slug}/comments", response_model=CommentResponse, status_code=201)
def create_comment(
    slug: str,
    comment: CommentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_active_user),
    cache: SettingsCache = Depends(get_settings_cache),
):
    if not cache.is_feature_enabled("comments"):
        raise FeatureDisabled("Comments are currently disabled")
    db_post = _published_post(slug, db)
    if comment.parent_id is not None:
        parent = crud.get_comment(db=db, comment_id=comment.parent_id)
        if parent is None or parent.post_id != db_post.id:
            raise ValidationFailed("Parent comment does not belong to this post")
    return crud.create_comment(db=db, post=db_post, author_id=user.id, comment=comment)
