"""
Utility functions and helpers
"""

from .helpers import (
    normalize_store_url,
    parse_decimal,
    format_price,
    format_order_date,
    mask_token
)

__all__ = [
    "normalize_store_url",
    "parse_decimal",
    "format_price",
    "format_order_date",
    "mask_token"
]
