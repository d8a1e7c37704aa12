import uuid
from datetime import datetime
from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint

class BlogLike(SQLModel, table=True):
    __tablename__ = "blog_likes"
    __table_args__ = (UniqueConstraint("blog_id", "user_id", name="uq_blog_likes_blog_user"),)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    blog_id: str = Field(foreign_key="blogs.id", index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class CommentLike(SQLModel, table=True):
    __tablename__ = "comment_likes"
    __table_args__ = (UniqueConstraint("comment_id", "user_id", name="uq_comment_likes_comment_user"),)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    comment_id: str = Field(foreign_key="blog_comments.id", index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
