import math
import re
import uuid
from datetime import datetime
from typing import Dict, List, Optional
from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy import desc, func
from sqlmodel import Session, select, or_, delete

from app.models.author import Author
from app.models.blog import Blog, BlogStatus, VISIBLE_STATUSES
from app.models.comment import Comment
from app.models.like import BlogLike, CommentLike
from app.models.user import User

WORDS_PER_MINUTE = 200
REQUIRED_BLOG_FIELDS = ("title_en", "content_en")

class BlogCreate(BaseModel):
    title_en: str
    content_en: str
    title_hi: Optional[str] = None
    excerpt_en: Optional[str] = None
    excerpt_hi: Optional[str] = None
    content_hi: Optional[str] = None
    destination: Optional[str] = None
    category: Optional[str] = None
    cover_image: Optional[str] = None
    images: List[str] = []

class BlogUpdate(BaseModel):
    title_en: Optional[str] = None
    title_hi: Optional[str] = None
    excerpt_en: Optional[str] = None
    excerpt_hi: Optional[str] = None
    content_en: Optional[str] = None
    content_hi: Optional[str] = None
    destination: Optional[str] = None
    category: Optional[str] = None
    cover_image: Optional[str] = None
    images: Optional[List[str]] = None


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "post"

def reading_time(content: str) -> int:
    words = len(re.sub(r"<[^>]+>", " ", content or "").split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


class BlogService:
    def __init__(self, session: Session):
        self.session = session

    def ensure_author(self, user: User) -> Author:
        """OAuth-created users may not have an author row yet."""
        author = self.session.get(Author, user.id)
        if not author:
            author = Author(id=user.id, name=user.name or user.email.split("@")[0], email=user.email, avatar_url=user.image)
            self.session.add(author)
            self.session.commit()
            self.session.refresh(author)
        return author

    def _unique_slug(self, title: str) -> str:
        base = slugify(title)
        slug = base
        while self.session.exec(select(Blog).where(Blog.slug == slug)).first():
            slug = f"{base}-{uuid.uuid4().hex[:6]}"
        return slug

    def list_visible(
        self,
        destination: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Blog]:
        query = select(Blog).where(Blog.status.in_(VISIBLE_STATUSES))
        if destination:
            query = query.where(Blog.destination.ilike(destination))
        if category:
            query = query.where(Blog.category.ilike(category))
        query = query.order_by(desc(Blog.published_at), desc(Blog.created_at)).offset(offset).limit(limit)
        return self.session.exec(query).all()

    def get_visible(self, id_or_slug: str, count_view: bool = True) -> Blog:
        blog = self.session.exec(
            select(Blog).where(or_(Blog.id == id_or_slug, Blog.slug == id_or_slug))
        ).first()
        if not blog or blog.status not in VISIBLE_STATUSES:
            raise HTTPException(status_code=404, detail="Blog not found")
        if count_view:
            blog.views = (blog.views or 0) + 1
            self.session.add(blog)
            self.session.commit()
            self.session.refresh(blog)
        return blog

    def get(self, blog_id: str) -> Blog:
        blog = self.session.get(Blog, blog_id)
        if not blog:
            raise HTTPException(status_code=404, detail="Blog not found")
        return blog

    def list_for_author(self, author_id: str) -> List[Blog]:
        return self.session.exec(
            select(Blog).where(Blog.author_id == author_id).order_by(desc(Blog.created_at))
        ).all()

    def submit(self, user: User, data: BlogCreate) -> Blog:
        author = self.ensure_author(user)
        blog = Blog(
            author_id=author.id,
            slug=self._unique_slug(data.title_en),
            status=BlogStatus.PENDING,
            reading_time_minutes=reading_time(data.content_en),
            **data.model_dump(),
        )
        self.session.add(blog)
        self.session.commit()
        self.session.refresh(blog)
        return blog

    def update(self, blog_id: str, user: User, data: BlogUpdate) -> Blog:
        blog = self.get(blog_id)
        if blog.author_id != user.id and not user.is_admin:
            raise HTTPException(status_code=403, detail="You can only edit your own blogs")

        updates = data.model_dump(exclude_unset=True)
        for field in REQUIRED_BLOG_FIELDS:
            if field in updates and not updates[field]:
                raise HTTPException(status_code=400, detail=f"{field} cannot be empty")

        for key, value in updates.items():
            setattr(blog, key, value)
        if data.content_en is not None:
            blog.reading_time_minutes = reading_time(data.content_en)

        # Author edits go back through moderation
        if not user.is_admin:
            blog.status = BlogStatus.PENDING
        blog.updated_at = datetime.utcnow()
        self.session.add(blog)
        self.session.commit()
        self.session.refresh(blog)
        return blog

    def set_status(self, blog_id: str, status: BlogStatus) -> Blog:
        blog = self.get(blog_id)
        blog.status = status
        if status == BlogStatus.PUBLISHED and not blog.published_at:
            blog.published_at = datetime.utcnow()
        blog.updated_at = datetime.utcnow()
        self.session.add(blog)
        self.session.commit()
        self.session.refresh(blog)
        return blog

    # Admin

    def list_for_admin(self, status: Optional[BlogStatus] = None) -> List[Dict]:
        """Blogs in any status, newest first, with the author attached."""
        query = select(Blog, Author).join(Author, Author.id == Blog.author_id, isouter=True)
        if status:
            query = query.where(Blog.status == status)
        rows = self.session.exec(query.order_by(desc(Blog.created_at))).all()

        result = []
        for blog, author in rows:
            data = blog.model_dump()
            data["author"] = (
                {"name": author.name, "email": author.email, "avatar_url": author.avatar_url}
                if author else {"name": "Unknown", "email": None, "avatar_url": None}
            )
            result.append(data)
        return result

    def stats(self) -> Dict[str, int]:
        counts = {s.value: 0 for s in BlogStatus}
        for status, count in self.session.exec(select(Blog.status, func.count(Blog.id)).group_by(Blog.status)).all():
            counts[BlogStatus(status).value] = count
        return {"total": sum(counts.values()), **counts}

    def delete(self, blog_id: str) -> None:
        blog = self.get(blog_id)
        comment_ids = list(self.session.exec(select(Comment.id).where(Comment.blog_id == blog_id)).all())
        if comment_ids:
            self.session.exec(delete(CommentLike).where(CommentLike.comment_id.in_(comment_ids)))
            # replies first, their parents are in the same blog
            self.session.exec(delete(Comment).where(Comment.blog_id == blog_id, Comment.parent_id.is_not(None)))
            self.session.exec(delete(Comment).where(Comment.blog_id == blog_id))
        self.session.exec(delete(BlogLike).where(BlogLike.blog_id == blog_id))
        self.session.delete(blog)
        self.session.commit()
