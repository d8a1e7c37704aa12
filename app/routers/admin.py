import logging
from typing import List, Literal, Optional
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlmodel import Session, select
from app.db.session import get_session
from app.models.blog import Blog, BlogStatus
from app.models.contact import ContactMessage
from app.models.product import Product
from app.models.user import User
from app.routers.auth import get_admin_user, get_current_user_optional
from app.services.blog import BlogService
from app.services.sync import ReconciliationError, debug_failing_blog, run_full_reconciliation, store_counts

logger = logging.getLogger(__name__)

router = APIRouter()

class BlogStatusUpdate(BaseModel):
    status: BlogStatus

class ContactStatusUpdate(BaseModel):
    status: Literal["new", "read", "replied"]

class ProductCreate(BaseModel):
    name: str
    affiliate_link: str
    description: Optional[str] = None
    price: Optional[str] = None
    image_url: Optional[str] = None
    destinations: List[str] = []
    is_active: bool = True

class ProductUpdate(BaseModel):
    name: Optional[str] = None
    affiliate_link: Optional[str] = None
    description: Optional[str] = None
    price: Optional[str] = None
    image_url: Optional[str] = None
    destinations: Optional[List[str]] = None
    is_active: Optional[bool] = None


# ==================== BLOG MODERATION ====================

@router.put("/blogs/{blog_id}/status", response_model=Blog)
def update_blog_status(
    blog_id: str,
    data: BlogStatusUpdate,
    admin: User = Depends(get_admin_user),
    session: Session = Depends(get_session)
):
    if data.status == BlogStatus.PENDING:
        raise HTTPException(status_code=400, detail="Moderation cannot move a blog back to pending")
    blog = BlogService(session).set_status(blog_id, data.status)
    logger.info("Blog %s moved to %s by %s", blog_id, data.status.value, admin.email)
    return blog


@router.get("/blogs")
def read_all_blogs(
    status: Optional[BlogStatus] = None,
    admin: User = Depends(get_admin_user),
    session: Session = Depends(get_session)
):
    """Every blog, or only those in one status (e.g. the pending queue)."""
    return BlogService(session).list_for_admin(status)

@router.delete("/blogs/{blog_id}")
def delete_blog(
    blog_id: str,
    admin: User = Depends(get_admin_user),
    session: Session = Depends(get_session)
):
    BlogService(session).delete(blog_id)
    logger.info("Blog %s deleted by %s", blog_id, admin.email)
    return {"message": "Blog deleted successfully"}

@router.get("/stats")
def read_blog_stats(
    admin: User = Depends(get_admin_user),
    session: Session = Depends(get_session)
):
    return BlogService(session).stats()


# ==================== PRODUCT MANAGEMENT ====================

@router.get("/products", response_model=List[Product])
def read_all_products(
    admin: User = Depends(get_admin_user),
    session: Session = Depends(get_session)
):
    """Inactive products included."""
    return session.exec(select(Product).order_by(Product.created_at.desc())).all()

@router.post("/products", response_model=Product, status_code=201)
def create_product(
    data: ProductCreate,
    admin: User = Depends(get_admin_user),
    session: Session = Depends(get_session)
):
    product = Product(**data.model_dump())
    session.add(product)
    session.commit()
    session.refresh(product)
    return product

@router.put("/products/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    data: ProductUpdate,
    admin: User = Depends(get_admin_user),
    session: Session = Depends(get_session)
):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(product, key, value)
    session.add(product)
    session.commit()
    session.refresh(product)
    return product

@router.delete("/products/{product_id}")
def delete_product(
    product_id: str,
    admin: User = Depends(get_admin_user),
    session: Session = Depends(get_session)
):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    session.delete(product)
    session.commit()
    return {"message": "Product deleted successfully"}


# ==================== CONTACT INBOX ====================

@router.get("/contact", response_model=List[ContactMessage])
def read_contact_messages(
    status: Optional[str] = None,
    admin: User = Depends(get_admin_user),
    session: Session = Depends(get_session)
):
    query = select(ContactMessage)
    if status:
        query = query.where(ContactMessage.status == status)
    return session.exec(query.order_by(ContactMessage.created_at.desc())).all()

@router.put("/contact/{message_id}", response_model=ContactMessage)
def update_contact_status(
    message_id: str,
    data: ContactStatusUpdate,
    admin: User = Depends(get_admin_user),
    session: Session = Depends(get_session)
):
    message = session.get(ContactMessage, message_id)
    if not message:
        raise HTTPException(status_code=404, detail="Message not found")
    message.status = data.status
    session.add(message)
    session.commit()
    session.refresh(message)
    return message


# ==================== DATABASE SYNC ====================

def _sync_denied(user: Optional[User]) -> Optional[JSONResponse]:
    if user is None:
        return JSONResponse(status_code=401, content={"success": False, "results": None, "error": "Unauthorized"})
    if not user.is_admin:
        return JSONResponse(status_code=403, content={"success": False, "results": None, "error": "Admin access required"})
    return None

@router.post("/db-sync/reconcile")
def trigger_reconciliation(current_user: Optional[User] = Depends(get_current_user_optional)):
    """Run the primary -> secondary reconciliation on demand."""
    denied = _sync_denied(current_user)
    if denied:
        return denied

    logger.info("[DB-SYNC] manual reconciliation triggered by %s", current_user.email)
    try:
        results = run_full_reconciliation()
    except ReconciliationError as e:
        return {"success": False, "results": None, "error": str(e)}
    return {"success": True, "results": results, "error": None}

@router.post("/db-sync/debug-failing-blog")
def debug_blog_sync(current_user: Optional[User] = Depends(get_current_user_optional)):
    """Try to sync one blog missing from the secondary store and expose the raw error."""
    denied = _sync_denied(current_user)
    if denied:
        return denied
    try:
        return debug_failing_blog()
    except ReconciliationError as e:
        return {"success": False, "blog_id": None, "error": {"message": str(e)}}

@router.get("/db-sync/status")
def sync_status(
    admin: User = Depends(get_admin_user)
):
    try:
        counts = store_counts()
    except ReconciliationError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"success": True, "counts": counts}
