"""Coupon models"""

from pydantic import BaseModel
from typing import Optional


class CouponValidation(BaseModel):
    """Response from /api/coupons/validate"""
    valid: bool = False
    discount_amount: float = 0.0
    message: Optional[str] = None
    error: Optional[str] = None


class AvailableCoupon(BaseModel):
    """Coupon offered for the current order amount"""
    id: int
    code: str
    discount_type: str
    discount_value: float
    minimum_order_amount: float = 0.0
    description: Optional[str] = None

    def can_use(self, order_amount: float) -> bool:
        return order_amount >= self.minimum_order_amount

    def describe(self) -> str:
        if self.discount_type == "percentage":
            return f"{self.discount_value:g}% de desconto"
        return f"{format_price(self.discount_value)} de desconto"


def format_price(amount: float) -> str:
    """Format an amount as Brazilian reais, e.g. R$ 1.234,50"""
    text = f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {text}"
