"""Browser session identity and coupon session state"""

import logging
import random
import string
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .storage import LocalStorage
from ..exceptions import StorageError

logger = logging.getLogger(__name__)

SESSION_STORAGE_KEY = "user-session-id"

_BASE36 = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    """Generate an id shaped like session_<epoch ms>_<9 base36 chars>"""
    suffix = "".join(random.choice(_BASE36) for _ in range(9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


def get_or_create_session_id(storage: LocalStorage) -> str:
    """
    Return the durable per-browser session id, creating it on first use.

    If storage is unavailable a fresh id is returned but not remembered.
    """
    try:
        session_id = storage.get_item(SESSION_STORAGE_KEY)
    except StorageError as e:
        logger.error(f"Error reading session id: {e}")
        return generate_session_id()

    if session_id:
        return session_id

    session_id = generate_session_id()
    try:
        storage.set_item(SESSION_STORAGE_KEY, session_id)
    except StorageError as e:
        logger.error(f"Error saving session id: {e}")
    return session_id


class CouponState(str, Enum):
    """Current state of the coupon input"""
    EMPTY = "empty"
    VALIDATING = "validating"
    APPLIED = "applied"
    ERROR = "error"


@dataclass
class CouponSession:
    """Coupon being entered during a cart/checkout session. Never persisted."""
    code: str = ""
    state: CouponState = CouponState.EMPTY
    discount_amount: float = 0.0
    message: str = ""
    error: str = ""

    @property
    def applied(self) -> bool:
        return self.state == CouponState.APPLIED

    def set_code(self, code: str) -> None:
        """Replace the code text; any applied discount is dropped"""
        self.code = code.upper()
        self.reset()

    def start_validation(self) -> None:
        self.state = CouponState.VALIDATING
        self.error = ""

    def apply(self, discount_amount: float, message: Optional[str] = None) -> None:
        self.state = CouponState.APPLIED
        self.discount_amount = discount_amount
        self.message = message or ""
        self.error = ""

    def fail(self, error: str) -> None:
        self.state = CouponState.ERROR
        self.discount_amount = 0.0
        self.message = ""
        self.error = error

    def remove(self) -> None:
        """Drop the coupon and its code"""
        self.code = ""
        self.reset()

    def reset(self) -> None:
        """Back to empty, keeping the code text"""
        self.state = CouponState.EMPTY
        self.discount_amount = 0.0
        self.message = ""
        self.error = ""
