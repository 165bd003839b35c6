"""Order tracking routes"""

from fastapi import APIRouter, HTTPException, Depends

from ..exceptions import StorefrontAPIError
from ..models.checkout import OrderSnapshot
from ..services.api_client import StorefrontClient
from ..services.order_tracking import OrderTracker
from .dependencies import get_client, get_order_trackers

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get("/{order_id}", response_model=OrderSnapshot)
async def get_order(
    order_id: int,
    client: StorefrontClient = Depends(get_client),
    trackers: dict[int, OrderTracker] = Depends(get_order_trackers),
):
    """Latest known order status"""
    tracker = trackers.get(order_id)
    if tracker and tracker.latest:
        return tracker.latest

    try:
        return await client.get_order(order_id)
    except StorefrontAPIError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail="Order not found")
        raise HTTPException(status_code=502, detail=str(e))
