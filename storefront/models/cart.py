"""Cart models"""

from pydantic import BaseModel, Field, TypeAdapter
from typing import Optional

from .product import Product


class CartItem(BaseModel):
    """Item in the shopping cart"""
    product: Product
    quantity: int = Field(ge=1)

    @property
    def total_price(self) -> float:
        return self.product.price * self.quantity


CartSnapshot = TypeAdapter(list[CartItem])


class AddToCartRequest(BaseModel):
    """Request to add a product to the cart"""
    product: Product
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    """Request to set an item's quantity; zero or less removes it"""
    quantity: int


class CartSummary(BaseModel):
    """Cart contents with derived totals"""
    items: list[CartItem] = []
    total_items: int = 0
    total_price: float = 0.0
    minimum_order: float
    remaining_for_minimum: float
    minimum_order_met: bool


class CartResponse(BaseModel):
    """Cart API response"""
    cart: CartSummary
    message: Optional[str] = None
