"""Checkout API routes"""

import logging
from fastapi import APIRouter, HTTPException, Depends

from ..core.config import settings
from ..exceptions import MinimumOrderNotMet, OrderSubmissionError
from ..models.checkout import (
    ApplyCouponRequest,
    CouponResponse,
    CustomerDetails,
    SubmitOrderResponse,
)
from ..models.coupon import AvailableCoupon
from ..services.api_client import StorefrontClient
from ..services.checkout import CheckoutService
from ..services.order_tracking import OrderTracker, prune_finished
from .dependencies import get_checkout, get_client, get_order_trackers

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkout", tags=["Checkout"])


def _coupon_response(checkout: CheckoutService) -> CouponResponse:
    coupon = checkout.coupon
    return CouponResponse(
        code=coupon.code,
        state=coupon.state.value,
        discount_amount=coupon.discount_amount,
        message=coupon.message,
        error=coupon.error,
        final_amount=checkout.final_amount(),
    )


@router.post("")
async def begin_checkout(checkout: CheckoutService = Depends(get_checkout)):
    """Check the cart meets the minimum order before showing the checkout form"""
    try:
        checkout.begin_checkout()
    except MinimumOrderNotMet as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ready": True, "total_amount": checkout.cart.get_total_price()}


@router.get("/coupons", response_model=list[AvailableCoupon])
async def list_available_coupons(checkout: CheckoutService = Depends(get_checkout)):
    """Coupons offered for the current subtotal"""
    return await checkout.available_coupons()


@router.put("/coupon", response_model=CouponResponse)
async def edit_coupon_code(
    request: ApplyCouponRequest,
    checkout: CheckoutService = Depends(get_checkout),
):
    """Change the coupon code text without validating it"""
    checkout.set_coupon_code(request.code or "")
    return _coupon_response(checkout)


@router.post("/coupon", response_model=CouponResponse)
async def apply_coupon(
    request: ApplyCouponRequest,
    checkout: CheckoutService = Depends(get_checkout),
):
    """Validate and apply a coupon code"""
    await checkout.apply_coupon(request.code)
    return _coupon_response(checkout)


@router.delete("/coupon", response_model=CouponResponse)
async def remove_coupon(checkout: CheckoutService = Depends(get_checkout)):
    """Remove the applied coupon"""
    checkout.remove_coupon()
    return _coupon_response(checkout)


@router.post("/orders", response_model=SubmitOrderResponse)
async def submit_order(
    customer: CustomerDetails,
    checkout: CheckoutService = Depends(get_checkout),
    client: StorefrontClient = Depends(get_client),
    trackers: dict[int, OrderTracker] = Depends(get_order_trackers),
):
    """Create the order and start tracking its status"""
    final_amount = checkout.final_amount()
    try:
        order_id = await checkout.submit_order(customer)
    except MinimumOrderNotMet as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OrderSubmissionError as e:
        raise HTTPException(status_code=502, detail=str(e))

    prune_finished(trackers)
    tracker = OrderTracker(
        client=client,
        order_id=order_id,
        interval=settings.order_poll_interval,
    )
    trackers[order_id] = tracker
    tracker.start()
    logger.info(f"Tracking order {order_id}")

    return SubmitOrderResponse(order_id=order_id, final_amount=final_amount)
