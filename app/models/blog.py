import uuid
from typing import Optional, List
from datetime import datetime
from enum import Enum
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import JSON, Text, Enum as SAEnum

class BlogStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    PUBLISHED = "published"
    REJECTED = "rejected"

# Statuses readers can see
VISIBLE_STATUSES = (BlogStatus.APPROVED, BlogStatus.PUBLISHED)

class Blog(SQLModel, table=True):
    __tablename__ = "blogs"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Author
    author_id: str = Field(foreign_key="authors.id", index=True)

    # Content (English / Hindi)
    title_en: str = Field(index=True)
    title_hi: Optional[str] = None
    excerpt_en: Optional[str] = None
    excerpt_hi: Optional[str] = None
    content_en: str = Field(sa_column=Column(Text, nullable=False))
    content_hi: Optional[str] = Field(default=None, sa_column=Column(Text))

    # Categorization
    destination: Optional[str] = Field(default=None, index=True)  # e.g. "Jaipur"
    category: Optional[str] = None  # e.g. "Heritage", "Food"

    slug: Optional[str] = Field(default=None, unique=True, index=True)

    # Images
    cover_image: Optional[str] = None
    images: List[str] = Field(default=[], sa_column=Column(JSON))

    # Moderation
    status: BlogStatus = Field(
        default=BlogStatus.PENDING,
        sa_column=Column(SAEnum(BlogStatus, values_callable=lambda x: [e.value for e in x]), nullable=False)
    )

    reading_time_minutes: Optional[int] = None
    views: int = Field(default=0)

    # Timestamps
    published_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
