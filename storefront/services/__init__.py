# Storefront services

from .api_client import StorefrontClient
from .cart_store import CartStore, CART_STORAGE_KEY, DEFAULT_MINIMUM_ORDER_VALUE
from .checkout import CheckoutService
from .optimistic import PendingOverlay
from .order_tracking import OrderTracker, prune_finished
from .polling import PollingTask
from .tracking import ApiCartTracker, CartTracker

__all__ = [
    "StorefrontClient",
    "CartStore",
    "CART_STORAGE_KEY",
    "DEFAULT_MINIMUM_ORDER_VALUE",
    "CheckoutService",
    "PendingOverlay",
    "OrderTracker",
    "prune_finished",
    "PollingTask",
    "ApiCartTracker",
    "CartTracker",
]
