import uuid
from typing import Optional, List
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import JSON
from datetime import datetime

class Product(SQLModel, table=True):
    """Affiliate listing shown next to destination content."""
    __tablename__ = "products"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Basic Info
    name: str = Field(index=True)
    description: Optional[str] = None
    price: Optional[str] = None  # Display price, e.g. "₹1,299"

    image_url: Optional[str] = None
    affiliate_link: str

    # Destinations this product is promoted on; empty means everywhere
    destinations: List[str] = Field(default=[], sa_column=Column(JSON))

    # Metadata
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
