"""Storefront exceptions"""

from typing import Optional


class StorefrontError(Exception):
    """Base exception for storefront errors"""
    pass


class StorefrontAPIError(StorefrontError):
    """Storefront REST API call failed (transport error or non-OK status)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StorageError(StorefrontError):
    """Local storage could not be read or written"""
    pass


class MinimumOrderNotMet(StorefrontError):
    """Order amount is below the minimum order value"""

    def __init__(self, message: str, minimum: float, amount: float):
        super().__init__(message)
        self.minimum = minimum
        self.amount = amount

    @property
    def remaining(self) -> float:
        return max(0.0, self.minimum - self.amount)


class OrderSubmissionError(StorefrontError):
    """Order creation was rejected or failed"""
    pass
