"""
Business logic services for fetching and aggregating store data
"""

from .shopify_client import ShopifyClient
from .fetcher import fetch_all
from .aggregator import aggregate, compare_stores
from .credential_store import CredentialStore

__all__ = ["ShopifyClient", "fetch_all", "aggregate", "compare_stores", "CredentialStore"]
