from sqlalchemy.orm import Session, selectinload

from db.database import utcnow
from models.content import Comment, Post, PrayerRequest, SiteContent, Tag
from schemas.common import slugify
from schemas.content import (
    CommentCreate,
    CommentUpdate,
    PostCreate,
    PostUpdate,
    PrayerRequestCreate,
    SiteContentUpsert,
)


# ---- Posts ----


def _unique_slug(db: Session, title: str, post_id: int | None = None) -> str:
    base = slugify(title) or "post"
    slug, n = base, 2
    while True:
        clash = db.query(Post.id).filter(Post.slug == slug)
        if post_id is not None:
            clash = clash.filter(Post.id != post_id)
        if clash.first() is None:
            return slug
        slug = f"{base}-{n}"
        n += 1


def _tags_by_name(db: Session, names: list[str]) -> list[Tag]:
    tags = []
    for name in dict.fromkeys(n for n in names if n):
        tag = db.query(Tag).filter(Tag.name == name).first()
        if tag is None:
            tag = Tag(name=name)
            db.add(tag)
        tags.append(tag)
    return tags


def create_post(db: Session, post: PostCreate, author_id: int) -> Post:
    db_post = Post(
        title=post.title,
        slug=_unique_slug(db, post.title),
        content=post.content,
        excerpt=post.excerpt or None,
        published=post.published,
        published_at=utcnow() if post.published else None,
        author_id=author_id,
        tags=_tags_by_name(db, post.tags),
    )
    db.add(db_post)
    db.commit()
    db.refresh(db_post)
    return db_post


def get_post(db: Session, post_id: int) -> Post | None:
    return db.query(Post).filter(Post.id == post_id).first()


def get_published_post(db: Session, slug: str) -> Post | None:
    return db.query(Post).filter(Post.slug == slug, Post.published.is_(True)).first()


def get_posts(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    published_only: bool = False,
    tag: str | None = None,
):
    query = db.query(Post).options(selectinload(Post.tags), selectinload(Post.author))
    if published_only:
        query = query.filter(Post.published.is_(True))
    if tag:
        query = query.filter(Post.tags.any(Tag.name == tag))
    total = query.count()
    order = Post.published_at.desc() if published_only else Post.created_at.desc()
    return query.order_by(order, Post.id.desc()).offset(skip).limit(limit).all(), total


def update_post(db: Session, db_post: Post, post: PostUpdate) -> Post:
    data = post.model_dump(exclude_unset=True)
    tags = data.pop("tags", None)
    if "title" in data and data["title"] != db_post.title:
        db_post.slug = _unique_slug(db, data["title"], post_id=db_post.id)
    if data.get("published") and not db_post.published:
        db_post.published_at = utcnow()
    for key, value in data.items():
        setattr(db_post, key, value)
    if tags is not None:
        db_post.tags = _tags_by_name(db, tags)
    db.commit()
    db.refresh(db_post)
    return db_post


def delete_post(db: Session, db_post: Post) -> None:
    db.delete(db_post)
    db.commit()


# ---- Comments ----


def create_comment(db: Session, post: Post, author_id: int, comment: CommentCreate) -> Comment:
    db_comment = Comment(
        content=comment.content,
        post_id=post.id,
        author_id=author_id,
        parent_id=comment.parent_id,
        is_approved=False,
    )
    db.add(db_comment)
    db.commit()
    db.refresh(db_comment)
    return db_comment


def get_comment(db: Session, comment_id: int) -> Comment | None:
    return db.query(Comment).filter(Comment.id == comment_id).first()


def get_comments(db: Session, approved: bool | None = None, post_id: int | None = None):
    query = db.query(Comment)
    if approved is not None:
        query = query.filter(Comment.is_approved.is_(approved))
    if post_id is not None:
        query = query.filter(Comment.post_id == post_id)
    return query.order_by(Comment.created_at.desc(), Comment.id.desc()).all()


def update_comment(db: Session, db_comment: Comment, changes: CommentUpdate) -> Comment:
    for key, value in changes.model_dump(exclude_none=True).items():
        setattr(db_comment, key, value)
    db.commit()
    db.refresh(db_comment)
    return db_comment


def delete_comment(db: Session, db_comment: Comment) -> None:
    db.delete(db_comment)
    db.commit()


# ---- Prayer requests ----


def create_prayer_request(db: Session, prayer_request: PrayerRequestCreate) -> PrayerRequest:
    data = prayer_request.model_dump()
    data["name"] = data["name"] or None
    db_request = PrayerRequest(**data)
    db.add(db_request)
    db.commit()
    db.refresh(db_request)
    return db_request


def get_prayer_request(db: Session, request_id: int) -> PrayerRequest | None:
    return db.query(PrayerRequest).filter(PrayerRequest.id == request_id).first()


def get_prayer_requests(db: Session, skip: int = 0, limit: int = 50):
    query = db.query(PrayerRequest)
    total = query.count()
    items = query.order_by(PrayerRequest.created_at.desc(), PrayerRequest.id.desc()).offset(skip).limit(limit).all()
    return items, total


def mark_prayer_request(db: Session, db_request: PrayerRequest, is_read: bool) -> PrayerRequest:
    db_request.is_read = is_read
    db.commit()
    db.refresh(db_request)
    return db_request


def delete_prayer_request(db: Session, db_request: PrayerRequest) -> None:
    db.delete(db_request)
    db.commit()


# ---- Site content ----


def get_site_content(
    db: Session, key: str | None = None, page: str | None = None, section: str | None = None
):
    query = db.query(SiteContent)
    if key:
        query = query.filter(SiteContent.key == key)
    elif page:
        query = query.filter(SiteContent.page == page)
        if section:
            query = query.filter(SiteContent.section == section)
    return query.order_by(SiteContent.page, SiteContent.section, SiteContent.order).all()


def upsert_site_content(db: Session, content: SiteContentUpsert) -> SiteContent:
    data = content.model_dump()
    db_content = db.query(SiteContent).filter(SiteContent.key == content.key).first()
    if db_content is None:
        db_content = SiteContent(**data)
        db.add(db_content)
    else:
        for key, value in data.items():
            setattr(db_content, key, value)
    db.commit()
    db.refresh(db_content)
    return db_content


def delete_site_content(db: Session, key: str) -> bool:
    deleted = db.query(SiteContent).filter(SiteContent.key == key).delete()
    db.commit()
    return deleted > 0
