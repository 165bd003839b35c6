"""Pytest configuration and fixtures"""
import json
import os
from typing import Any, Optional

import httpx
import pytest

# Keep test runs away from the on-disk storage file
os.environ.setdefault("STOREFRONT_STORAGE_PATH", "")
os.environ.setdefault("STOREFRONT_DEBUG", "false")

from storefront.core.storage import MemoryStorage
from storefront.exceptions import StorageError
from storefront.models.product import Product
from storefront.services.api_client import StorefrontClient
from storefront.services.cart_store import CartStore

BASE_URL = "http://storefront.test"


class FakeStorefrontAPI:
    """Route table standing in for the storefront REST API"""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.minimum_order_value: Optional[str] = "200"
        self.coupons: dict[str, float] = {"SAVE50": 50.0, "WELCOME10": 10.0}
        self.order_response = (200, {"success": True, "orderId": 42})
        self.order_statuses = ["pending"]
        self.fail_paths: set[str] = set()
        self.validate_response: Optional[tuple[int, Any]] = None
        self.available_response: Optional[tuple[int, Any]] = None

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> dict:
        return json.loads(request.content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in self.fail_paths:
            raise httpx.ConnectError("connection refused", request=request)

        if path == "/api/settings":
            settings = [{"setting_key": "store_name", "setting_value": "WEPINK"}]
            if self.minimum_order_value is not None:
                settings.append({
                    "setting_key": "minimum_order_value",
                    "setting_value": self.minimum_order_value,
                })
            return httpx.Response(200, json={"settings": settings})

        if path == "/api/cart-tracking":
            return httpx.Response(200, json={"success": True, "triggered_discounts": []})

        if path == "/api/coupons/validate":
            if self.validate_response is not None:
                status, payload = self.validate_response
                return httpx.Response(status, json=payload)
            code = self.body(request)["code"]
            if code in self.coupons:
                return httpx.Response(200, json={
                    "valid": True,
                    "discount_amount": self.coupons[code],
                    "message": f"Cupom {code} aplicado!",
                })
            return httpx.Response(400, json={"valid": False, "error": "Cupom não encontrado"})

        if path == "/api/coupons/available":
            if self.available_response is not None:
                status, payload = self.available_response
                return httpx.Response(status, json=payload)
            return httpx.Response(200, json={"coupons": [
                {
                    "id": 1,
                    "code": "WELCOME10",
                    "discount_type": "fixed",
                    "discount_value": 10,
                    "minimum_order_amount": 100,
                    "description": "Boas-vindas",
                },
                {
                    "id": 2,
                    "code": "VIP15",
                    "discount_type": "percentage",
                    "discount_value": 15,
                    "minimum_order_amount": 500,
                },
            ]})

        if path == "/api/orders":
            status, payload = self.order_response
            return httpx.Response(status, json=payload)

        if path.startswith("/api/orders/"):
            status = self.order_statuses.pop(0) if len(self.order_statuses) > 1 else self.order_statuses[0]
            order_id = int(path.rsplit("/", 1)[1])
            return httpx.Response(200, json={"id": order_id, "status": status, "total_amount": 250.0})

        return httpx.Response(404, json={"error": "Not found"})


class BrokenStorage(MemoryStorage):
    """Storage whose every operation fails"""

    def get_item(self, key):
        raise StorageError("storage unavailable")

    def set_item(self, key, value):
        raise StorageError("quota exceeded")

    def remove_item(self, key):
        raise StorageError("storage unavailable")


def _product(product_id: int, price: float, name: Optional[str] = None) -> Product:
    return Product(id=product_id, name=name or f"Produto {product_id}", price=price)


@pytest.fixture
def make_product():
    """Factory for catalog products"""
    return _product


@pytest.fixture
def broken_storage():
    return BrokenStorage()


@pytest.fixture
def fake_api():
    return FakeStorefrontAPI()


@pytest.fixture
def api_client(fake_api):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
    return StorefrontClient(BASE_URL, http_client=http_client, user_agent="pytest")


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def cart(storage):
    """Loaded cart with the default minimum and no tracking"""
    store = CartStore(storage)
    store.load()
    return store
