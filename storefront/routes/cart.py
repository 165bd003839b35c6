"""Cart API routes"""

from fastapi import APIRouter, HTTPException, Depends

from ..models.cart import AddToCartRequest, UpdateCartItemRequest, CartResponse
from ..services.cart_store import CartStore
from .dependencies import get_cart

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartResponse)
async def get_cart_contents(cart: CartStore = Depends(get_cart)):
    """Cart items with totals and minimum order status"""
    return CartResponse(cart=cart.summary())


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    cart: CartStore = Depends(get_cart),
):
    """Add a product to the cart"""
    try:
        cart.add_to_cart(request.product, request.quantity)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CartResponse(
        cart=cart.summary(),
        message=f"Added {request.quantity}x {request.product.name} to cart",
    )


@router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: int,
    request: UpdateCartItemRequest,
    cart: CartStore = Depends(get_cart),
):
    """Set an item's quantity; zero or less removes it"""
    cart.update_quantity(product_id, request.quantity)
    return CartResponse(cart=cart.summary(), message="Cart updated")


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(
    product_id: int,
    cart: CartStore = Depends(get_cart),
):
    """Remove an item from the cart"""
    cart.remove_from_cart(product_id)
    return CartResponse(cart=cart.summary(), message="Item removed")


@router.delete("", response_model=CartResponse)
async def clear_cart(cart: CartStore = Depends(get_cart)):
    """Clear all items from cart"""
    cart.clear_cart()
    return CartResponse(cart=cart.summary(), message="Cart cleared")
