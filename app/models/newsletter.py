import uuid
from datetime import datetime
from sqlmodel import Field, SQLModel

class NewsletterSubscriber(SQLModel, table=True):
    __tablename__ = "newsletter_subscribers"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    email: str = Field(unique=True, index=True)
    is_active: bool = Field(default=True)
    subscribed_at: datetime = Field(default_factory=datetime.utcnow)
