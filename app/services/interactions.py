import logging
from datetime import datetime
from typing import Dict, List, Optional
from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, delete

from app.models.author import Author
from app.models.blog import Blog
from app.models.comment import Comment
from app.models.like import BlogLike, CommentLike
from app.models.user import User

logger = logging.getLogger(__name__)

class InteractionService:
    """Likes and comments. A like is a unique (subject, user) row, never a counter."""

    def __init__(self, session: Session):
        self.session = session

    # Blog likes

    def _get_blog(self, blog_id: str) -> Blog:
        blog = self.session.get(Blog, blog_id)
        if not blog:
            raise HTTPException(status_code=404, detail="Blog not found")
        return blog

    def toggle_blog_like(self, blog_id: str, user_id: str) -> bool:
        """Returns True when the blog is liked after the call."""
        self._get_blog(blog_id)
        existing = self.session.exec(
            select(BlogLike).where(BlogLike.blog_id == blog_id, BlogLike.user_id == user_id)
        ).first()
        if existing:
            self.session.delete(existing)
            self.session.commit()
            return False

        self.session.add(BlogLike(blog_id=blog_id, user_id=user_id))
        try:
            self.session.commit()
        except IntegrityError:
            # A concurrent toggle inserted the row first
            self.session.rollback()
        return True

    def blog_like_count(self, blog_id: str) -> int:
        return self.session.exec(
            select(func.count(BlogLike.id)).where(BlogLike.blog_id == blog_id)
        ).one()

    def has_liked_blog(self, blog_id: str, user_id: Optional[str]) -> bool:
        if not user_id:
            return False
        return self.session.exec(
            select(BlogLike).where(BlogLike.blog_id == blog_id, BlogLike.user_id == user_id)
        ).first() is not None

    def batch_counts(self, blog_ids: List[str], user_id: Optional[str] = None) -> Dict:
        """Like and comment counts for a page of blogs, plus the ones the user liked."""
        if not blog_ids:
            return {"likes": {}, "comments": {}, "userLikes": []}
        likes = dict(self.session.exec(
            select(BlogLike.blog_id, func.count(BlogLike.id))
            .where(BlogLike.blog_id.in_(blog_ids))
            .group_by(BlogLike.blog_id)
        ).all())
        comments = dict(self.session.exec(
            select(Comment.blog_id, func.count(Comment.id))
            .where(Comment.blog_id.in_(blog_ids))
            .group_by(Comment.blog_id)
        ).all())
        user_likes: List[str] = []
        if user_id:
            user_likes = list(self.session.exec(
                select(BlogLike.blog_id).where(BlogLike.user_id == user_id, BlogLike.blog_id.in_(blog_ids))
            ).all())
        return {"likes": likes, "comments": comments, "userLikes": user_likes}

    # Comment likes

    def toggle_comment_like(self, comment_id: str, user_id: str) -> bool:
        self._get_comment(comment_id)
        existing = self.session.exec(
            select(CommentLike).where(CommentLike.comment_id == comment_id, CommentLike.user_id == user_id)
        ).first()
        if existing:
            self.session.delete(existing)
            self.session.commit()
            return False

        self.session.add(CommentLike(comment_id=comment_id, user_id=user_id))
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
        return True

    def user_comment_likes(self, comment_ids: List[str], user_id: Optional[str]) -> List[str]:
        if not comment_ids or not user_id:
            return []
        return list(self.session.exec(
            select(CommentLike.comment_id).where(
                CommentLike.user_id == user_id,
                CommentLike.comment_id.in_(comment_ids)
            )
        ).all())

    # Comments

    def _get_comment(self, comment_id: str) -> Comment:
        comment = self.session.get(Comment, comment_id)
        if not comment:
            raise HTTPException(status_code=404, detail="Comment not found")
        return comment

    def list_comments(self, blog_id: str) -> List[Dict]:
        comments = self.session.exec(
            select(Comment).where(Comment.blog_id == blog_id).order_by(Comment.created_at)
        ).all()
        if not comments:
            return []
        ids = [c.id for c in comments]

        like_counts = dict(self.session.exec(
            select(CommentLike.comment_id, func.count(CommentLike.id))
            .where(CommentLike.comment_id.in_(ids))
            .group_by(CommentLike.comment_id)
        ).all())
        reply_counts = dict(self.session.exec(
            select(Comment.parent_id, func.count(Comment.id))
            .where(Comment.parent_id.in_(ids))
            .group_by(Comment.parent_id)
        ).all())
        authors = {
            a.id: a for a in self.session.exec(
                select(Author).where(Author.id.in_(list({c.user_id for c in comments})))
            ).all()
        }

        result = []
        for comment in comments:
            author = authors.get(comment.user_id)
            data = comment.model_dump()
            data["author"] = {"name": author.name, "avatar_url": author.avatar_url} if author else None
            data["like_count"] = like_counts.get(comment.id, 0)
            data["reply_count"] = reply_counts.get(comment.id, 0)
            result.append(data)
        return result

    def add_comment(self, blog_id: str, user: User, content: str, parent_id: Optional[str] = None) -> Comment:
        self._get_blog(blog_id)
        if not content or not content.strip():
            raise HTTPException(status_code=400, detail="Comment cannot be empty")

        if parent_id:
            parent = self._get_comment(parent_id)
            if parent.blog_id != blog_id:
                raise HTTPException(status_code=400, detail="Parent comment belongs to a different blog")
            if parent.parent_id:
                raise HTTPException(status_code=400, detail="Replies cannot be nested")

        comment = Comment(blog_id=blog_id, user_id=user.id, content=content.strip(), parent_id=parent_id)
        self.session.add(comment)
        self.session.commit()
        self.session.refresh(comment)
        return comment

    def update_comment(self, comment_id: str, user: User, content: str) -> Comment:
        comment = self._get_comment(comment_id)
        if comment.user_id != user.id:
            raise HTTPException(status_code=403, detail="You can only edit your own comments")
        if not content or not content.strip():
            raise HTTPException(status_code=400, detail="Comment cannot be empty")

        comment.content = content.strip()
        comment.is_edited = True
        comment.updated_at = datetime.utcnow()
        self.session.add(comment)
        self.session.commit()
        self.session.refresh(comment)
        return comment

    def delete_comment(self, comment_id: str, user: User) -> None:
        comment = self._get_comment(comment_id)
        if comment.user_id != user.id and not user.is_admin:
            raise HTTPException(status_code=403, detail="Not authorized to delete this comment")

        # Replies and likes reference the comment, remove them first
        reply_ids = list(self.session.exec(select(Comment.id).where(Comment.parent_id == comment_id)).all())
        doomed = reply_ids + [comment_id]
        self.session.exec(delete(CommentLike).where(CommentLike.comment_id.in_(doomed)))
        if reply_ids:
            self.session.exec(delete(Comment).where(Comment.id.in_(reply_ids)))
        self.session.delete(comment)
        self.session.commit()
        logger.info("Deleted comment %s and %d replies", comment_id, len(reply_ids))
