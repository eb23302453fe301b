"""
Data models and schemas for the multi-store dashboard
"""

from .schemas import (
    StoreCredential,
    ShopInfo,
    Variant,
    Product,
    Order,
    StoreDataBundle,
    AggregateSummary,
    StoreComparison,
    ProductRow,
    OrderRow,
    StoreDashboard,
    DashboardResponse,
    AnalyticsResponse,
    StoreConnectionRequest,
    DashboardRequest,
    ConnectedStore,
    ErrorResponse,
    SuccessResponse,
    validate_bundle
)

__all__ = [
    "StoreCredential",
    "ShopInfo",
    "Variant",
    "Product",
    "Order",
    "StoreDataBundle",
    "AggregateSummary",
    "StoreComparison",
    "ProductRow",
    "OrderRow",
    "StoreDashboard",
    "DashboardResponse",
    "AnalyticsResponse",
    "StoreConnectionRequest",
    "DashboardRequest",
    "ConnectedStore",
    "ErrorResponse",
    "SuccessResponse",
    "validate_bundle"
]
