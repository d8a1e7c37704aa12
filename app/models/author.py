from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel

class Author(SQLModel, table=True):
    """Public profile of a user. Shares its id with the owning user row."""
    __tablename__ = "authors"

    id: str = Field(primary_key=True, foreign_key="users.id")

    name: str
    email: Optional[str] = None
    slug: Optional[str] = Field(default=None, unique=True, index=True)
    avatar_url: Optional[str] = None
    bio: Optional[str] = None

    # Socials
    website: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None
    youtube: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
