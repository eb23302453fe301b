import logging
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union
from urllib.parse import urlparse

from store_dashboard.exceptions import DataFormatError

logger = logging.getLogger(__name__)

DECIMAL_RE = re.compile(r"^[+-]?\d+(\.\d+)?$")


def normalize_store_url(url: str) -> str:
    """
    Reduce a store URL to the bare shop host

    The Admin API base URL is built as https://{host}/admin/api/..., so
    protocol, path and trailing slashes are dropped.

    Args:
        url: Store URL as entered, e.g. "https://demo.myshopify.com/"

    Returns:
        str: Lowercased host, e.g. "demo.myshopify.com"; "" for blank input
    """
    if not url:
        return ""

    url = url.strip()
    if not url.lower().startswith(('http://', 'https://')):
        url = 'https://' + url

    parsed = urlparse(url)
    return (parsed.netloc or "").lower().rstrip('/')


def parse_decimal(value: Any, field: str = "value") -> Decimal:
    """
    Parse a base-10 decimal string (or number) into a Decimal

    Args:
        value: Decimal string such as "10.50", or an int/float
        field: Field name reported on failure

    Returns:
        Decimal: Parsed value

    Raises:
        DataFormatError: If the value is missing, non-numeric or not finite
    """
    if value is None or isinstance(value, bool):
        raise DataFormatError(field, f"expected a decimal string, got {value!r}")

    text = str(value).strip()
    if isinstance(value, str) and not DECIMAL_RE.match(text):
        raise DataFormatError(field, f"{value!r} is not a decimal number")

    try:
        parsed = Decimal(text)
    except (InvalidOperation, ValueError):
        raise DataFormatError(field, f"{value!r} is not a decimal number")

    if not parsed.is_finite():
        raise DataFormatError(field, f"{value!r} is not a finite number")

    return parsed


def format_price(price: Union[str, int, float, Decimal, None]) -> Optional[str]:
    """
    Format a price for table display, keeping the upstream digits as-is

    Args:
        price: Price value

    Returns:
        str: "$" followed by the price, or None when no price is given
    """
    if price is None:
        return None
    return f"${price}"


def format_order_date(created_at: datetime) -> str:
    """ISO calendar date of an order timestamp"""
    return created_at.date().isoformat()


def mask_token(token: str, visible: int = 4) -> str:
    """Hide all but the last few characters of an access token"""
    if not token:
        return ""
    if len(token) <= visible:
        return "*" * len(token)
    return "*" * (len(token) - visible) + token[-visible:]
