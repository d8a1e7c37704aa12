from typing import List, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session
from app.db.session import get_session
from app.models.user import User
from app.routers.auth import get_current_user, get_current_user_optional
from app.services.interactions import InteractionService

router = APIRouter()

class LikeToggle(BaseModel):
    blog_id: str

def get_interaction_service(session: Session = Depends(get_session)) -> InteractionService:
    return InteractionService(session)

@router.post("/like")
def toggle_like(
    data: LikeToggle,
    current_user: User = Depends(get_current_user),
    service: InteractionService = Depends(get_interaction_service)
):
    liked = service.toggle_blog_like(data.blog_id, current_user.id)
    return {"liked": liked, "count": service.blog_like_count(data.blog_id)}

@router.get("/like")
def read_like_status(
    blog_id: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: InteractionService = Depends(get_interaction_service)
):
    user_id = current_user.id if current_user else None
    return {
        "count": service.blog_like_count(blog_id),
        "liked": service.has_liked_blog(blog_id, user_id),
    }

class BatchRequest(BaseModel):
    blog_ids: List[str] = []
    user_id: Optional[str] = None

@router.post("/batch")
def read_batch_counts(
    data: BatchRequest,
    service: InteractionService = Depends(get_interaction_service)
):
    """Counts for blog cards; blogs without likes or comments are left out."""
    return service.batch_counts(data.blog_ids, data.user_id)
