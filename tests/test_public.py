"""Tests for the public site endpoints."""
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from crud.settings import set_setting
from db.database import get_db
from main import app
from models.content import PrayerRequest
from models.subscriber import Subscriber


def test_subscribe_lifecycle(client: TestClient, db):
    response = client.post("/api/subscribe", json={"email": "Reader@Gmail.com", "name": "Reader"})
    assert response.status_code == 200
    assert response.json()["status"] == "created"

    again = client.post("/api/subscribe", json={"email": "reader@gmail.com"})
    assert again.json()["status"] == "existing"
    assert db.query(Subscriber).count() == 1

    response = client.post("/api/unsubscribe", json={"email": "reader@gmail.com"})
    assert response.status_code == 200
    assert db.query(Subscriber).one().status.value == "unsubscribed"

    back = client.post("/api/subscribe", json={"email": "reader@gmail.com"})
    assert back.json()["status"] == "reactivated"
    db.expire_all()
    assert db.query(Subscriber).one().status.value == "active"


def test_unsubscribe_link(client: TestClient, db):
    client.post("/api/subscribe", json={"email": "reader@gmail.com"})
    subscriber_id = db.query(Subscriber).one().id

    assert client.get("/api/unsubscribe", params={"id": subscriber_id}).status_code == 200
    assert client.get("/api/unsubscribe").status_code == 400
    assert client.get("/api/unsubscribe", params={"id": 999}).status_code == 404


def test_subscribe_rejects_bad_email(client: TestClient):
    response = client.post("/api/subscribe", json={"email": "not-an-email"})
    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "email"


def test_prayer_request_submitted(client: TestClient, db):
    response = client.post(
        "/api/prayer-requests",
        json={"name": "Ana", "request": "<script>alert(1)</script>Peace for my family"},
    )
    assert response.status_code == 201
    assert response.json()["message"] == "Prayer request submitted successfully"

    stored = db.query(PrayerRequest).one()
    assert "<" not in stored.request
    assert stored.is_private is True
    assert stored.is_read is False


def test_prayer_requests_disabled(client: TestClient, db):
    set_setting(db, "allowPrayerRequests", False)
    db.commit()
    response = client.post("/api/prayer-requests", json={"request": "Guidance"})
    assert response.status_code == 403
    assert response.json()["code"] == "feature_disabled"


def test_prayer_requests_strict_rate_limit(client: TestClient):
    for _ in range(5):
        assert client.post("/api/prayer-requests", json={"request": "Strength"}).status_code == 201
    assert client.post("/api/prayer-requests", json={"request": "Strength"}).status_code == 429


def test_maintenance_reads_through_cache(client: TestClient, db):
    assert client.get("/api/settings/public").json()["maintenanceMode"] is False

    set_setting(db, "maintenanceMode", True)
    db.commit()

    response = client.get("/api/maintenance")
    assert response.status_code == 200
    assert response.json() == {"maintenanceMode": True}
    assert "no-store" in response.headers["Cache-Control"]


def test_health(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_site_content(admin_client: TestClient):
    for key, section, order in (("about.intro", "intro", 0), ("about.story", "story", 1), ("home.hero", "hero", 0)):
        page = key.split(".")[0]
        response = admin_client.put(
            "/api/admin/site-content",
            json={"key": key, "page": page, "section": section, "content": f"{key} text", "order": order},
        )
        assert response.status_code == 200

    # upsert by key
    admin_client.post(
        "/api/admin/site-content",
        json={"key": "home.hero", "page": "home", "section": "hero", "title": "Welcome", "content": "Hi"},
    )

    about = admin_client.get("/api/site-content", params={"page": "about"}).json()
    assert [c["key"] for c in about] == ["about.intro", "about.story"]

    hero = admin_client.get("/api/site-content", params={"key": "home.hero"}).json()
    assert len(hero) == 1
    assert hero[0]["title"] == "Welcome"

    assert admin_client.delete("/api/admin/site-content/home.hero").status_code == 200
    assert admin_client.delete("/api/admin/site-content/home.hero").status_code == 404


def test_site_content_degrades_to_empty(client: TestClient):
    broken = sessionmaker(bind=create_engine("sqlite://"))

    def no_tables():
        session = broken()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = no_tables
    response = client.get("/api/site-content", params={"page": "about"})
    assert response.status_code == 200
    assert response.json() == []


def test_posts_and_comments(admin_client: TestClient):
    created = admin_client.post(
        "/api/admin/posts",
        json={
            "title": "Walking Through Romans!",
            "content": "Chapter one notes",
            "published": True,
            "tags": ["romans", "study"],
        },
    )
    assert created.status_code == 201
    post = created.json()
    assert post["slug"] == "walking-through-romans"
    assert {t["name"] for t in post["tags"]} == {"romans", "study"}

    draft = admin_client.post("/api/admin/posts", json={"title": "Walking Through Romans", "content": "WIP"})
    assert draft.json()["slug"] == "walking-through-romans-2"

    listed = admin_client.get("/api/posts").json()
    assert listed["total"] == 1
    assert listed["posts"][0]["slug"] == post["slug"]
    assert admin_client.get("/api/posts", params={"tag": "genesis"}).json()["total"] == 0
    assert admin_client.get("/api/posts", params={"take": 51}).status_code == 400
    assert admin_client.get(f"/api/posts/{draft.json()['slug']}").status_code == 404

    comment = admin_client.post(f"/api/posts/{post['slug']}/comments", json={"content": "Great read"})
    assert comment.status_code == 201
    assert comment.json()["is_approved"] is False

    detail = admin_client.get(f"/api/posts/{post['slug']}").json()
    assert detail["comments"] == []

    approved = admin_client.patch(f"/api/admin/comments/{comment.json()['id']}", json={"is_approved": True})
    assert approved.status_code == 200

    detail = admin_client.get(f"/api/posts/{post['slug']}").json()
    assert [c["content"] for c in detail["comments"]] == ["Great read"]
    assert admin_client.get("/api/admin/comments", params={"approved": False}).json() == []


def test_comment_requires_sign_in(client: TestClient, admin_client: TestClient):
    post = admin_client.post(
        "/api/admin/posts", json={"title": "Psalm 23", "content": "The Lord is my shepherd", "published": True}
    ).json()
    admin_client.post("/api/auth/sign-out")

    response = client.post(f"/api/posts/{post['slug']}/comments", json={"content": "Amen"})
    assert response.status_code == 401


def test_comments_disabled(admin_client: TestClient, db):
    post = admin_client.post(
        "/api/admin/posts", json={"title": "Psalm 1", "content": "Blessed is the one", "published": True}
    ).json()
    set_setting(db, "allowComments", False)
    db.commit()

    response = admin_client.post(f"/api/posts/{post['slug']}/comments", json={"content": "Amen"})
    assert response.status_code == 403
    assert response.json()["code"] == "feature_disabled"
