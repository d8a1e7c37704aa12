from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from app.db.session import get_session
from app.models.author import Author
from app.models.user import User, UserRead
from app.routers.auth import get_current_user
from app.services.user import UserService, ProfileUpdate

router = APIRouter()

def get_user_service(session: Session = Depends(get_session)) -> UserService:
    return UserService(session)

@router.get("/me", response_model=UserRead)
def read_user_me(current_user: User = Depends(get_current_user)):
    """
    Get current user.
    """
    return current_user

@router.get("/me/profile", response_model=Author)
def read_my_profile(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    return service.get_profile(current_user)

@router.put("/me/profile", response_model=Author)
def update_my_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    return service.update_profile(current_user, data)

@router.get("/authors/{slug}", response_model=Author)
def read_author(slug: str, service: UserService = Depends(get_user_service)):
    author = service.get_by_slug(slug)
    if not author:
        raise HTTPException(status_code=404, detail="Author not found")
    return author
