# Core modules

from .config import settings, get_settings, Settings
from .storage import LocalStorage, MemoryStorage, FileStorage, create_storage
from .session import CouponSession, CouponState, get_or_create_session_id

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "LocalStorage",
    "MemoryStorage",
    "FileStorage",
    "create_storage",
    "CouponSession",
    "CouponState",
    "get_or_create_session_id",
]
