from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select
from app.db.session import get_session
from app.models.product import Product

router = APIRouter()

def matches_destination(product: Product, destination: Optional[str]) -> bool:
    """Products without destinations are promoted everywhere."""
    if not destination or not product.destinations:
        return True
    wanted = destination.strip().lower()
    return any(d.strip().lower() == wanted for d in product.destinations)

@router.get("/", response_model=List[Product])
def read_products(
    destination: Optional[str] = None,
    limit: int = Query(4, ge=1, le=50),
    session: Session = Depends(get_session)
):
    products = session.exec(
        select(Product).where(Product.is_active == True).order_by(Product.created_at.desc())
    ).all()
    # destinations is a JSON column, filter in Python so SQLite and Postgres behave the same
    return [p for p in products if matches_destination(p, destination)][:limit]
