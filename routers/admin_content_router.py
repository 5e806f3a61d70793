"""Admin moderation of posts, comments, prayer requests and site content."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import crud.content as crud
from core.auth import require_admin
from core.errors import NotFound
from db.database import get_db
from models.user import User
from schemas.content import (
    CommentResponse,
    CommentUpdate,
    PostCreate,
    PostList,
    PostResponse,
    PostUpdate,
    PrayerRequestResponse,
    PrayerRequestUpdate,
    SiteContentResponse,
    SiteContentUpsert,
)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# ---- Posts ----


def _get_post(post_id: int, db: Session):
    db_post = crud.get_post(db=db, post_id=post_id)
    if db_post is None:
        raise NotFound("Post not found")
    return db_post


@router.get("/posts", response_model=PostList)
def read_posts(
    take: int = Query(20, ge=1, le=100),
    page: int = Query(0, ge=0),
    tag: Optional[str] = None,
    db: Session = Depends(get_db),
):
    posts, total = crud.get_posts(db=db, skip=page * take, limit=take, tag=tag)
    return {"posts": posts, "total": total, "page": page, "take": take}


@router.post("/posts", response_model=PostResponse, status_code=201)
def create_post(post: PostCreate, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return crud.create_post(db=db, post=post, author_id=admin.id)


@router.get("/posts/{post_id}", response_model=PostResponse)
def read_post(post_id: int, db: Session = Depends(get_db)):
    return _get_post(post_id, db)


@router.patch("/posts/{post_id}", response_model=PostResponse)
def update_post(post_id: int, post: PostUpdate, db: Session = Depends(get_db)):
    return crud.update_post(db=db, db_post=_get_post(post_id, db), post=post)


@router.delete("/posts/{post_id}")
def delete_post(post_id: int, db: Session = Depends(get_db)):
    crud.delete_post(db=db, db_post=_get_post(post_id, db))
    return {"message": "Post deleted successfully"}


# ---- Comments ----


def _get_comment(comment_id: int, db: Session):
    db_comment = crud.get_comment(db=db, comment_id=comment_id)
    if db_comment is None:
        raise NotFound("Comment not found")
    return db_comment


@router.get("/comments", response_model=List[CommentResponse])
def read_comments(approved: Optional[bool] = None, post_id: Optional[int] = None, db: Session = Depends(get_db)):
    return crud.get_comments(db=db, approved=approved, post_id=post_id)


@router.patch("/comments/{comment_id}", response_model=CommentResponse)
def update_comment(comment_id: int, changes: CommentUpdate, db: Session = Depends(get_db)):
    return crud.update_comment(db=db, db_comment=_get_comment(comment_id, db), changes=changes)


@router.delete("/comments/{comment_id}")
def delete_comment(comment_id: int, db: Session = Depends(get_db)):
    crud.delete_comment(db=db, db_comment=_get_comment(comment_id, db))
    return {"message": "Comment deleted successfully"}


# ---- Prayer requests ----


def _get_prayer_request(request_id: int, db: Session):
    db_request = crud.get_prayer_request(db=db, request_id=request_id)
    if db_request is None:
        raise NotFound("Prayer request not found")
    return db_request


@router.get("/prayer-requests")
def read_prayer_requests(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    items, total = crud.get_prayer_requests(db=db, skip=skip, limit=limit)
    return {
        "prayer_requests": [PrayerRequestResponse.model_validate(r) for r in items],
        "total": total,
    }


@router.patch("/prayer-requests/{request_id}", response_model=PrayerRequestResponse)
def update_prayer_request(request_id: int, changes: PrayerRequestUpdate, db: Session = Depends(get_db)):
    db_request = _get_prayer_request(request_id, db)
    return crud.mark_prayer_request(db=db, db_request=db_request, is_read=changes.is_read)


@router.delete("/prayer-requests/{request_id}")
def delete_prayer_request(request_id: int, db: Session = Depends(get_db)):
    crud.delete_prayer_request(db=db, db_request=_get_prayer_request(request_id, db))
    return {"message": "Prayer request deleted successfully"}


# ---- Site content ----


@router.get("/site-content", response_model=List[SiteContentResponse])
def read_site_content(page: Optional[str] = None, db: Session = Depends(get_db)):
    return crud.get_site_content(db=db, page=page)


@router.put("/site-content", response_model=SiteContentResponse)
@router.post("/site-content", response_model=SiteContentResponse)
def upsert_site_content(content: SiteContentUpsert, db: Session = Depends(get_db)):
    return crud.upsert_site_content(db=db, content=content)


@router.delete("/site-content/{key}")
def delete_site_content(key: str, db: Session = Depends(get_db)):
    if not crud.delete_site_content(db=db, key=key):
        raise NotFound("Content not found")
    return {"message": "Content deleted successfully"}
