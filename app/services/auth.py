import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional
from sqlmodel import Session, select
from fastapi import HTTPException, status

from app.models.user import User, UserRole
from app.models.author import Author
from app.core.config import settings
from app.core import security
from app.services.email import send_password_reset_email

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

class AuthService:
    def __init__(self, session: Session):
        self.session = session

    def get_user_by_email(self, email: str) -> Optional[User]:
        # Use ilike for case-insensitive lookup
        return self.session.exec(select(User).where(User.email == email)).first() or \
               self.session.exec(select(User).where(User.email.ilike(email))).first()

    def register_user(self, email: str, password: str, name: Optional[str] = None) -> User:
        if not email or not password:
            raise HTTPException(status_code=400, detail="Email and password are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if self.get_user_by_email(email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="An account with this email already exists"
            )

        display_name = name or email.split("@")[0]
        user = User(
            email=email,
            name=display_name,
            password_hash=security.get_password_hash(password),
            role=UserRole.USER,
        )
        self.session.add(user)
        self.session.flush()

        # Every user gets an author profile for blog submissions
        self.session.add(Author(id=user.id, name=display_name, email=email))
        self.session.commit()
        self.session.refresh(user)
        logger.info("Registered user %s", user.id)
        return user

    def authenticate_user(self, email: str, password: str) -> tuple[Optional[User], Optional[str]]:
        user = self.get_user_by_email(email)
        if not user:
            return None, "User not found. Please check your email or sign up."
        if not user.is_active:
            return None, "This account has been deactivated."
        if not security.verify_password(password, user.password_hash):
            return None, "Incorrect password. Please try again."
        return user, None

    def create_token_for(self, user: User) -> str:
        return security.create_access_token(data={"sub": user.id, "role": user.role.value})

    def create_password_reset_token(self, email: str) -> Optional[str]:
        user = self.get_user_by_email(email)
        if not user:
            return None

        token = secrets.token_urlsafe(32)
        user.reset_token = token
        user.reset_token_expires_at = datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
        self.session.add(user)
        self.session.commit()

        send_password_reset_email(user.email, user.name or "Traveler", token)
        return token

    def reset_password(self, token: str, new_password: str) -> bool:
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        user = self.session.exec(select(User).where(User.reset_token == token)).first()
        if not user or not user.reset_token_expires_at:
            return False
        if datetime.utcnow() > user.reset_token_expires_at:
            return False

        user.password_hash = security.get_password_hash(new_password)
        user.reset_token = None
        user.reset_token_expires_at = None
        user.updated_at = datetime.utcnow()
        self.session.add(user)
        self.session.commit()
        return True
