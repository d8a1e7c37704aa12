import uuid
from typing import Optional
from datetime import datetime
from enum import Enum
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Enum as SAEnum

class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"

class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Basic Info
    name: Optional[str] = None
    email: str = Field(unique=True, index=True)
    password_hash: Optional[str] = None  # Empty for OAuth-only accounts
    image: Optional[str] = None

    role: UserRole = Field(
        default=UserRole.USER,
        sa_column=Column(SAEnum(UserRole, values_callable=lambda x: [e.value for e in x]), nullable=False)
    )

    # Account Status (users are deactivated, never deleted)
    is_active: bool = Field(default=True)

    # Password reset
    reset_token: Optional[str] = Field(default=None, index=True)
    reset_token_expires_at: Optional[datetime] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserRead(SQLModel):
    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: datetime
