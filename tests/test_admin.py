import pytest
from sqlmodel import select

from app.models import Blog, BlogLike, BlogStatus, Comment, CommentLike, ContactMessage, Product


@pytest.fixture
def blogs(session, user):
    rows = [
        Blog(id="b-pending", author_id=user.id, title_en="Pushkar Fair", content_en="Camels.", status=BlogStatus.PENDING),
        Blog(id="b-live", author_id=user.id, title_en="Jaipur Guide", content_en="Forts.", status=BlogStatus.PUBLISHED),
        Blog(id="b-no", author_id=user.id, title_en="Spam", content_en="Buy now.", status=BlogStatus.REJECTED),
    ]
    for blog in rows:
        session.add(blog)
    session.commit()


def test_pending_queue(client, blogs, admin_headers):
    response = client.get("/api/v1/admin/blogs", params={"status": "pending"}, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert [b["id"] for b in body] == ["b-pending"]
    assert body[0]["author"]["name"] == "Asha"
    assert body[0]["author"]["email"] == "asha@example.com"


def test_all_blogs_in_any_status(client, blogs, admin_headers):
    ids = {b["id"] for b in client.get("/api/v1/admin/blogs", headers=admin_headers).json()}
    assert ids == {"b-pending", "b-live", "b-no"}


def test_blog_stats(client, blogs, admin_headers):
    assert client.get("/api/v1/admin/stats", headers=admin_headers).json() == {
        "total": 3,
        "pending": 1,
        "approved": 0,
        "published": 1,
        "rejected": 1,
    }


def test_admin_listing_requires_admin(client, blogs, user_headers):
    assert client.get("/api/v1/admin/blogs", headers=user_headers).status_code == 403
    assert client.get("/api/v1/admin/stats", headers=user_headers).status_code == 403


def test_delete_blog_removes_comments_and_likes(client, session, blogs, user, admin_headers):
    session.add(Comment(id="c1", blog_id="b-live", user_id=user.id, content="Great"))
    session.commit()
    for row in (
        Comment(id="c2", blog_id="b-live", user_id=user.id, content="Agreed", parent_id="c1"),
        BlogLike(blog_id="b-live", user_id=user.id),
        CommentLike(comment_id="c2", user_id=user.id),
    ):
        session.add(row)
        session.commit()

    response = client.delete("/api/v1/admin/blogs/b-live", headers=admin_headers)

    assert response.status_code == 200
    session.expire_all()
    assert session.get(Blog, "b-live") is None
    assert session.exec(select(Comment)).all() == []
    assert session.exec(select(BlogLike)).all() == []
    assert session.exec(select(CommentLike)).all() == []


def test_delete_unknown_blog(client, admin_headers):
    assert client.delete("/api/v1/admin/blogs/missing", headers=admin_headers).status_code == 404


def test_admin_product_list_includes_inactive(client, session, admin_headers):
    session.add(Product(id="p-on", name="Scarf", affiliate_link="https://example.com/1"))
    session.add(Product(id="p-off", name="Retired", affiliate_link="https://example.com/2", is_active=False))
    session.commit()

    ids = {p["id"] for p in client.get("/api/v1/admin/products", headers=admin_headers).json()}

    assert ids == {"p-on", "p-off"}
    assert [p["id"] for p in client.get("/api/v1/products/").json()] == ["p-on"]


def test_contact_inbox_and_status(client, session, admin_headers):
    session.add(ContactMessage(id="m1", name="Asha", email="asha@example.com", message="Collab?"))
    session.commit()

    inbox = client.get("/api/v1/admin/contact", params={"status": "new"}, headers=admin_headers).json()
    assert [m["id"] for m in inbox] == ["m1"]

    updated = client.put("/api/v1/admin/contact/m1", headers=admin_headers, json={"status": "replied"})
    assert updated.json()["status"] == "replied"
    assert client.get("/api/v1/admin/contact", params={"status": "new"}, headers=admin_headers).json() == []

    invalid = client.put("/api/v1/admin/contact/m1", headers=admin_headers, json={"status": "archived"})
    assert invalid.status_code == 422
    missing = client.put("/api/v1/admin/contact/nope", headers=admin_headers, json={"status": "read"})
    assert missing.status_code == 404
