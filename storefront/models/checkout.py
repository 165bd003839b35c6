"""Checkout and order models"""

from pydantic import BaseModel
from typing import Optional
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    AWAITING_PAYMENT = "awaiting_payment"
    PAID = "paid"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = {OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value}


class CustomerDetails(BaseModel):
    """Customer data collected by the checkout form"""
    customer_name: str
    customer_phone: str
    customer_email: str = ""
    customer_address: str = ""
    customer_cep: str = ""
    customer_street: str = ""
    customer_number: str = ""
    customer_complement: str = ""
    customer_neighborhood: str = ""
    customer_city: str = ""
    customer_state: str = ""

    def full_address(self) -> str:
        """Structured address joined by commas, or the free-form address"""
        parts = [
            self.customer_street,
            f"nº {self.customer_number}" if self.customer_number else "",
            self.customer_complement,
            self.customer_neighborhood,
            self.customer_city,
            self.customer_state,
        ]
        joined = ", ".join(part for part in parts if part)
        return joined or self.customer_address


class OrderProduct(BaseModel):
    """Product reference sent with an order"""
    id: int
    name: str
    price: float


class OrderItem(BaseModel):
    """Item in an order request"""
    product: OrderProduct
    quantity: int


class OrderRequest(CustomerDetails):
    """Body of POST /api/orders"""
    items: list[OrderItem]
    total_amount: float
    coupon_code: Optional[str] = None
    discount_amount: Optional[float] = None
    final_amount: float
    payment_method: str = "pix"


class OrderResult(BaseModel):
    """Response from POST /api/orders"""
    success: bool = False
    orderId: Optional[int] = None
    error: Optional[str] = None
    details: Optional[str] = None


class OrderSnapshot(BaseModel):
    """Order as returned by GET /api/orders/{id}"""
    id: int
    status: str
    total_amount: float = 0.0
    customer_name: Optional[str] = None
    qr_code_url: Optional[str] = None
    pix_copy_paste: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_final(self) -> bool:
        return self.status in TERMINAL_STATUSES


class ApplyCouponRequest(BaseModel):
    """Request to validate and apply a coupon code"""
    code: Optional[str] = None


class CouponResponse(BaseModel):
    """Coupon state returned to the UI"""
    code: str
    state: str
    discount_amount: float
    message: str = ""
    error: str = ""
    final_amount: float


class SubmitOrderResponse(BaseModel):
    """Response after an order was created"""
    order_id: int
    final_amount: float
