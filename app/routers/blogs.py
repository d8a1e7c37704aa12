from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session
from app.db.session import get_session
from app.models.blog import Blog
from app.models.user import User
from app.routers.auth import get_current_user
from app.services.blog import BlogService, BlogCreate, BlogUpdate

router = APIRouter()

def get_blog_service(session: Session = Depends(get_session)) -> BlogService:
    return BlogService(session)

@router.get("/", response_model=List[Blog])
def read_blogs(
    destination: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: BlogService = Depends(get_blog_service)
):
    """Approved and published blogs, newest first."""
    return service.list_visible(destination=destination, category=category, limit=limit, offset=offset)

@router.get("/mine", response_model=List[Blog])
def read_my_blogs(
    current_user: User = Depends(get_current_user),
    service: BlogService = Depends(get_blog_service)
):
    return service.list_for_author(current_user.id)

@router.get("/{id_or_slug}", response_model=Blog)
def read_blog(id_or_slug: str, service: BlogService = Depends(get_blog_service)):
    return service.get_visible(id_or_slug)

@router.post("/", response_model=Blog, status_code=status.HTTP_201_CREATED)
def submit_blog(
    data: BlogCreate,
    current_user: User = Depends(get_current_user),
    service: BlogService = Depends(get_blog_service)
):
    """Submit a blog for moderation."""
    return service.submit(current_user, data)

@router.put("/{blog_id}", response_model=Blog)
def update_blog(
    blog_id: str,
    data: BlogUpdate,
    current_user: User = Depends(get_current_user),
    service: BlogService = Depends(get_blog_service)
):
    return service.update(blog_id, current_user, data)
