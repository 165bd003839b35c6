"""Product models"""

from pydantic import BaseModel
from typing import Optional


class Product(BaseModel):
    """Product in the catalog, as returned by the storefront API"""
    id: int
    name: str
    price: float
    description: Optional[str] = None
    original_price: Optional[float] = None
    image_url: Optional[str] = None
    category_id: Optional[int] = None
    is_featured: bool = False
    is_active: bool = True
    stock_quantity: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True
