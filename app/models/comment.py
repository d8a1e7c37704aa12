import uuid
from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Text

class Comment(SQLModel, table=True):
    __tablename__ = "blog_comments"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # References
    blog_id: str = Field(foreign_key="blogs.id", index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    parent_id: Optional[str] = Field(default=None, foreign_key="blog_comments.id", index=True)  # One level of replies

    content: str = Field(sa_column=Column(Text, nullable=False))
    is_edited: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
