"""
Storefront core: guest/server cart reconciliation and admin order handling.
"""

__version__ = "1.0.0"
