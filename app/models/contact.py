import uuid
from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Text

class ContactMessage(SQLModel, table=True):
    __tablename__ = "contact_messages"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str
    email: str
    subject: Optional[str] = None
    message: str = Field(sa_column=Column(Text, nullable=False))
    status: str = Field(default="new")  # new -> read -> replied
    created_at: datetime = Field(default_factory=datetime.utcnow)
