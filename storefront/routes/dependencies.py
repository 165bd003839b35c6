"""Request dependencies: the session's services live on app.state"""

from fastapi import Request

from ..services.api_client import StorefrontClient
from ..services.cart_store import CartStore
from ..services.checkout import CheckoutService
from ..services.order_tracking import OrderTracker


def get_cart(request: Request) -> CartStore:
    return request.app.state.cart


def get_checkout(request: Request) -> CheckoutService:
    return request.app.state.checkout


def get_client(request: Request) -> StorefrontClient:
    return request.app.state.client


def get_order_trackers(request: Request) -> dict[int, OrderTracker]:
    return request.app.state.order_trackers
