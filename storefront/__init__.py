"""
WEPINK Storefront

Client-side cart state and pricing engine for the WEPINK storefront,
with thin async clients for the storefront REST API.
"""

__version__ = "1.0.0"
