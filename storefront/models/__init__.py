# Storefront Models

from .product import Product
from .cart import (
    CartItem,
    CartSnapshot,
    AddToCartRequest,
    UpdateCartItemRequest,
    CartSummary,
    CartResponse,
)
from .coupon import CouponValidation, AvailableCoupon, format_price
from .checkout import (
    OrderStatus,
    CustomerDetails,
    OrderItem,
    OrderProduct,
    OrderRequest,
    OrderResult,
    OrderSnapshot,
    ApplyCouponRequest,
    CouponResponse,
    SubmitOrderResponse,
)

__all__ = [
    "Product",
    "CartItem",
    "CartSnapshot",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartSummary",
    "CartResponse",
    "CouponValidation",
    "AvailableCoupon",
    "format_price",
    "OrderStatus",
    "CustomerDetails",
    "OrderItem",
    "OrderProduct",
    "OrderRequest",
    "OrderResult",
    "OrderSnapshot",
    "ApplyCouponRequest",
    "CouponResponse",
    "SubmitOrderResponse",
]
