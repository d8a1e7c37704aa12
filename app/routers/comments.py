from typing import Optional
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlmodel import Session
from app.db.session import get_session
from app.models.comment import Comment
from app.models.user import User
from app.routers.auth import get_current_user
from app.services.interactions import InteractionService

router = APIRouter()

class CommentCreate(BaseModel):
    blog_id: str
    content: str
    parent_id: Optional[str] = None

class CommentUpdate(BaseModel):
    content: str

class CommentLikeToggle(BaseModel):
    comment_id: str

def get_interaction_service(session: Session = Depends(get_session)) -> InteractionService:
    return InteractionService(session)

@router.get("/")
def read_comments(
    blog_id: str,
    user_id: Optional[str] = None,
    service: InteractionService = Depends(get_interaction_service)
):
    """Comments for a blog plus the ids of comments the given user liked."""
    comments = service.list_comments(blog_id)
    user_likes = service.user_comment_likes([c["id"] for c in comments], user_id)
    return {"comments": comments, "userLikes": user_likes}

@router.post("/", response_model=Comment, status_code=status.HTTP_201_CREATED)
def add_comment(
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    service: InteractionService = Depends(get_interaction_service)
):
    return service.add_comment(data.blog_id, current_user, data.content, parent_id=data.parent_id)

@router.put("/{comment_id}", response_model=Comment)
def update_comment(
    comment_id: str,
    data: CommentUpdate,
    current_user: User = Depends(get_current_user),
    service: InteractionService = Depends(get_interaction_service)
):
    return service.update_comment(comment_id, current_user, data.content)

@router.delete("/{comment_id}")
def delete_comment(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    service: InteractionService = Depends(get_interaction_service)
):
    service.delete_comment(comment_id, current_user)
    return {"success": True}

@router.post("/like")
def toggle_comment_like(
    data: CommentLikeToggle,
    current_user: User = Depends(get_current_user),
    service: InteractionService = Depends(get_interaction_service)
):
    liked = service.toggle_comment_like(data.comment_id, current_user.id)
    return {"liked": liked}
