"""
Storefront Application

Serves one shopper's cart session to the storefront UI: cart, coupons,
checkout and order tracking, backed by the storefront REST API.
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .core.config import settings
from .core.storage import LocalStorage, create_storage
from .routes import cart_router, checkout_router, orders_router
from .services.api_client import StorefrontClient
from .services.cart_store import CartStore
from .services.checkout import CheckoutService
from .services.tracking import ApiCartTracker

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    client: Optional[StorefrontClient] = None,
    storage: Optional[LocalStorage] = None,
) -> FastAPI:
    """Build the application; tests pass their own client and storage"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events"""
        logger.info("Storefront starting up...")
        logger.info(f"Storefront API: {settings.api_base_url}")

        api_client = client or StorefrontClient(
            api_base_url=settings.api_base_url,
            timeout=settings.http_timeout,
            user_agent=settings.user_agent,
        )
        local_storage = storage or create_storage(settings.storage_path)
        tracker = ApiCartTracker(api_client, local_storage)
        cart = CartStore(
            storage=local_storage,
            client=api_client,
            tracker=tracker,
            minimum_order_value=settings.default_minimum_order_value,
        )
        await cart.initialize()

        app.state.client = api_client
        app.state.cart = cart
        app.state.checkout = CheckoutService(cart, api_client)
        app.state.order_trackers = {}

        yield

        logger.info("Storefront shutting down...")
        for order_tracker in app.state.order_trackers.values():
            await order_tracker.stop()
        await tracker.drain(timeout=5.0)
        await api_client.close()

    app = FastAPI(
        title=settings.app_name,
        description="Cart, coupons and checkout for the WEPINK storefront",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(orders_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "storefront",
            "storage_configured": settings.storage_configured,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
