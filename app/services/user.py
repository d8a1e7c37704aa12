from typing import Optional
from fastapi import HTTPException
from pydantic import BaseModel
from sqlmodel import Session, select
from app.models.author import Author
from app.models.user import User
from app.services.blog import slugify

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    slug: Optional[str] = None
    avatar_url: Optional[str] = None
    website: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None
    youtube: Optional[str] = None

class UserService:
    def __init__(self, session: Session):
        self.session = session

    def get_profile(self, user: User) -> Author:
        author = self.session.get(Author, user.id)
        if not author:
            author = Author(id=user.id, name=user.name or user.email.split("@")[0], email=user.email)
            self.session.add(author)
            self.session.commit()
            self.session.refresh(author)
        return author

    def get_by_slug(self, slug: str) -> Optional[Author]:
        return self.session.exec(select(Author).where(Author.slug == slug)).first()

    def update_profile(self, user: User, data: ProfileUpdate) -> Author:
        author = self.get_profile(user)
        updates = data.model_dump(exclude_unset=True)

        if updates.get("slug"):
            updates["slug"] = slugify(updates["slug"])
            taken = self.get_by_slug(updates["slug"])
            if taken and taken.id != author.id:
                raise HTTPException(status_code=409, detail="This profile URL is already taken")

        for key, value in updates.items():
            setattr(author, key, value)
        if data.name:
            user.name = data.name
            self.session.add(user)
        self.session.add(author)
        self.session.commit()
        self.session.refresh(author)
        return author
