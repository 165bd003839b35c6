"""
Checkout

Coupon flow and the minimum-order gate in front of order creation.
A coupon can never take an order below the minimum: the gate is checked
once on the subtotal when checkout starts and again on the discounted
amount when the order is submitted.
"""

import logging
from typing import Optional

from ..core.session import CouponSession, CouponState
from ..exceptions import MinimumOrderNotMet, OrderSubmissionError, StorefrontError
from ..models.checkout import (
    CustomerDetails,
    OrderItem,
    OrderProduct,
    OrderRequest,
)
from ..models.coupon import AvailableCoupon, format_price
from .api_client import StorefrontClient
from .cart_store import CartStore

logger = logging.getLogger(__name__)

EMPTY_CODE_ERROR = "Digite um código de cupom"
INVALID_COUPON_ERROR = "Cupom inválido"
COUPON_REQUEST_ERROR = "Erro ao validar cupom. Tente novamente."


class CheckoutService:
    """Checkout flow for one cart session"""

    def __init__(self, cart: CartStore, client: StorefrontClient, payment_method: str = "pix"):
        self.cart = cart
        self.client = client
        self.payment_method = payment_method
        self.coupon = CouponSession()
        self.cart.add_listener(self._on_cart_change)

    # ==================== Minimum order ====================

    def begin_checkout(self) -> None:
        """
        Check the cart can enter checkout.

        Raises:
            MinimumOrderNotMet: cart is empty or its subtotal is below the minimum
        """
        subtotal = self.cart.get_total_price()
        minimum = self.cart.get_minimum_order()
        if not self.cart.items or not self.cart.is_minimum_order_met():
            raise MinimumOrderNotMet(
                f"Pedido mínimo de {format_price(minimum)}. "
                f"Adicione mais {format_price(self.cart.get_remaining_for_minimum())} para continuar.",
                minimum=minimum,
                amount=subtotal,
            )

    def _on_cart_change(self) -> None:
        if self.coupon.state in (CouponState.EMPTY, CouponState.VALIDATING):
            return
        if not self.cart.items or not self.cart.is_minimum_order_met():
            logger.info(f"Cart changed below the minimum, dropping coupon {self.coupon.code}")
            self.coupon.reset()

    def final_amount(self) -> float:
        """Subtotal minus the applied coupon discount"""
        return self.cart.get_total_price() - self.coupon.discount_amount

    # ==================== Coupons ====================

    def set_coupon_code(self, code: str) -> None:
        """Edit the coupon code; a previously applied coupon stops applying"""
        self.coupon.set_code(code)

    def remove_coupon(self) -> None:
        self.coupon.remove()

    async def apply_coupon(self, code: Optional[str] = None) -> CouponSession:
        """Validate the coupon code against the current subtotal"""
        if code is not None:
            self.coupon.set_code(code)

        code = self.coupon.code.strip()
        if not code:
            self.coupon.fail(EMPTY_CODE_ERROR)
            return self.coupon

        self.coupon.start_validation()
        try:
            result = await self.client.validate_coupon(code, self.cart.get_total_price())
        except StorefrontError as e:
            logger.error(f"Error validating coupon: {e}")
            self.coupon.fail(COUPON_REQUEST_ERROR)
            return self.coupon

        if result.valid and result.discount_amount > 0:
            self.coupon.code = code.upper()
            self.coupon.apply(result.discount_amount, result.message)
            logger.info(f"Coupon {self.coupon.code} applied: -{result.discount_amount}")
        else:
            self.coupon.fail(result.error or INVALID_COUPON_ERROR)
        return self.coupon

    async def available_coupons(self) -> list[AvailableCoupon]:
        """Coupons offered for the current subtotal; empty on failure"""
        if not self.cart.items:
            return []
        try:
            return await self.client.get_available_coupons(self.cart.get_total_price())
        except StorefrontError as e:
            logger.error(f"Error loading available coupons: {e}")
            return []

    async def select_coupon(self, coupon: AvailableCoupon) -> CouponSession:
        return await self.apply_coupon(coupon.code)

    # ==================== Orders ====================

    def build_order(self, customer: CustomerDetails) -> OrderRequest:
        """Order body for the current cart and coupon"""
        applied = self.coupon.applied
        return OrderRequest(
            **customer.model_dump(exclude={"customer_address"}),
            customer_address=customer.full_address(),
            items=[
                OrderItem(
                    product=OrderProduct(
                        id=item.product.id,
                        name=item.product.name,
                        price=item.product.price,
                    ),
                    quantity=item.quantity,
                )
                for item in self.cart.items
            ],
            total_amount=self.cart.get_total_price(),
            coupon_code=self.coupon.code if applied else None,
            discount_amount=self.coupon.discount_amount if applied else None,
            final_amount=self.final_amount(),
            payment_method=self.payment_method,
        )

    async def submit_order(self, customer: CustomerDetails) -> int:
        """
        Create the order and clear the cart.

        The cart is hidden while the request is in flight and restored if
        it fails.

        Returns:
            The new order id

        Raises:
            MinimumOrderNotMet: final amount is below the minimum (nothing is sent)
            OrderSubmissionError: the order could not be created
        """
        minimum = self.cart.get_minimum_order()
        final_amount = self.final_amount()
        if final_amount < minimum:
            prefix = "Mesmo com desconto, o" if self.coupon.applied else "O"
            raise MinimumOrderNotMet(
                f"Pedido mínimo de {format_price(minimum)}. "
                f"{prefix} valor final deve ser pelo menos {format_price(minimum)}.",
                minimum=minimum,
                amount=final_amount,
            )

        order = self.build_order(customer)
        token = self.cart.hide_items()
        try:
            result = await self.client.create_order(order)
        except StorefrontError as e:
            self.cart.rollback_pending(token)
            logger.error(f"Error creating order: {e}")
            raise OrderSubmissionError(f"Erro ao processar pedido: {e}") from e
        except BaseException:
            self.cart.rollback_pending(token)
            raise

        if not result.success or result.orderId is None:
            self.cart.rollback_pending(token)
            reason = result.error or result.details or "Erro ao criar pedido"
            logger.error(f"Order creation failed: {reason}")
            raise OrderSubmissionError(f"Erro ao processar pedido: {reason}")

        self.cart.commit_pending(token)
        self.coupon.remove()
        logger.info(f"Order {result.orderId} created: {final_amount}")
        return result.orderId
