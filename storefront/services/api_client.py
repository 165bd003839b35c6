"""
Storefront API Client

HTTP client for the storefront REST API: settings, cart tracking,
coupons and orders.
"""

import logging
import math
from typing import Optional, Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..exceptions import StorefrontAPIError
from ..models.coupon import AvailableCoupon, CouponValidation
from ..models.checkout import OrderRequest, OrderResult, OrderSnapshot

logger = logging.getLogger(__name__)

MINIMUM_ORDER_SETTING = "minimum_order_value"

ModelT = TypeVar("ModelT", bound=BaseModel)


class StorefrontClient:
    """
    Client for the storefront REST API.

    No call is retried; failures surface as StorefrontAPIError and the
    caller decides whether they are fatal.
    """

    def __init__(
        self,
        api_base_url: str,
        timeout: float = 30.0,
        user_agent: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize storefront client.

        Args:
            api_base_url: Base URL of the storefront API
            timeout: Request timeout in seconds
            user_agent: User agent reported to the cart tracking endpoint
            http_client: Pre-built client, mostly for tests
        """
        self.base_url = api_base_url.rstrip("/")
        self.user_agent = user_agent or f"python-httpx/{httpx.__version__}"
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        allow_error_body: bool = False,
    ) -> dict[str, Any]:
        """
        Make a JSON request.

        With allow_error_body, a 4xx response carrying a JSON body is
        returned instead of raised, for endpoints that explain rejections.
        """
        url = f"{self.base_url}{path}"
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            response = await self._http_client.request(
                method=method,
                url=url,
                headers=headers,
                json=body,
            )
        except httpx.HTTPError as e:
            logger.error(f"Request failed: {method} {path} - {e}")
            raise StorefrontAPIError(f"{method} {path} failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            if allow_error_body and response.status_code < 500 and isinstance(data, dict):
                return data
            raise StorefrontAPIError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )

        if not isinstance(data, dict):
            raise StorefrontAPIError(
                f"{method} {path} returned a non-object body",
                status_code=response.status_code,
            )
        return data

    @staticmethod
    def _parse(model: type[ModelT], data: Any, path: str) -> ModelT:
        """Validate a response body, raising StorefrontAPIError when it is malformed"""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed response from {path}: {e}")
            raise StorefrontAPIError(
                f"{path} returned a malformed {model.__name__}: {e.error_count()} invalid field(s)"
            ) from e

    # ==================== Settings ====================

    async def get_settings(self) -> dict[str, Any]:
        """Get site settings as a key -> value mapping"""
        data = await self._request("GET", "/api/settings")
        return {
            entry.get("setting_key"): entry.get("setting_value")
            for entry in data.get("settings") or []
            if isinstance(entry, dict)
        }

    async def get_minimum_order_value(self) -> Optional[float]:
        """
        Get the configured minimum order value.

        Returns None when the setting is missing, not numeric or not positive.
        """
        site_settings = await self.get_settings()
        raw = site_settings.get(MINIMUM_ORDER_SETTING)
        if not raw:
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric {MINIMUM_ORDER_SETTING}: {raw!r}")
            return None
        if not math.isfinite(value) or value <= 0:
            return None
        return value

    # ==================== Cart tracking ====================

    async def track_cart_addition(
        self,
        session_id: str,
        product_id: int,
        product_name: str,
        product_price: float,
        quantity_added: int,
    ) -> list:
        """Report a cart addition; returns any discounts it triggered"""
        data = await self._request(
            "POST",
            "/api/cart-tracking",
            body={
                "session_id": session_id,
                "product_id": product_id,
                "product_name": product_name,
                "product_price": product_price,
                "quantity_added": quantity_added,
                "user_agent": self.user_agent,
            },
        )
        return data.get("triggered_discounts") or []

    # ==================== Coupons ====================

    async def validate_coupon(self, code: str, order_amount: float) -> CouponValidation:
        """Validate a coupon code against an order amount"""
        data = await self._request(
            "POST",
            "/api/coupons/validate",
            body={"code": code, "order_amount": order_amount},
            allow_error_body=True,
        )
        return self._parse(CouponValidation, data, "/api/coupons/validate")

    async def get_available_coupons(self, order_amount: float) -> list[AvailableCoupon]:
        """List coupons usable for an order amount"""
        data = await self._request(
            "POST",
            "/api/coupons/available",
            body={"order_amount": order_amount},
        )
        coupons = data.get("coupons") or []
        if not isinstance(coupons, list):
            raise StorefrontAPIError("Unexpected response from /api/coupons/available: coupons is not a list")
        return [self._parse(AvailableCoupon, c, "/api/coupons/available") for c in coupons]

    # ==================== Orders ====================

    async def create_order(self, order: OrderRequest) -> OrderResult:
        """Create an order from the current cart"""
        data = await self._request(
            "POST",
            "/api/orders",
            body=order.model_dump(),
            allow_error_body=True,
        )
        return self._parse(OrderResult, data, "/api/orders")

    async def get_order(self, order_id: int) -> OrderSnapshot:
        """Get order details"""
        data = await self._request("GET", f"/api/orders/{order_id}")
        order = data.get("order", data)
        return self._parse(OrderSnapshot, order, f"/api/orders/{order_id}")
