import logging
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Sequence

from store_dashboard.exceptions import DataFormatError
from store_dashboard.models.schemas import (
    AggregateSummary, OrderRow, ProductRow, StoreComparison, StoreDashboard, StoreDataBundle
)
from store_dashboard.utils.helpers import format_order_date, format_price, parse_decimal

logger = logging.getLogger(__name__)


# Bundles reach the fold either validated (StoreDataBundle) or as raw
# mappings; only the fields read below are required of either.
def _read(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        if name not in record:
            raise DataFormatError(name, "field is missing")
        return record[name]
    if not hasattr(record, name):
        raise DataFormatError(name, f"field is missing from {type(record).__name__}")
    return getattr(record, name)


def _read_list(record: Any, name: str) -> Sequence[Any]:
    value = _read(record, name)
    if not isinstance(value, (list, tuple)):
        raise DataFormatError(name, f"expected a list, got {type(value).__name__}")
    return value


def _store_url(record: Any) -> str:
    if isinstance(record, Mapping):
        return record.get("storeUrl", record.get("store_url", "")) or ""
    return getattr(record, "store_url", "") or ""


def aggregate(bundles: Iterable[Any]) -> AggregateSummary:
    """
    Compute cross-store totals

    Revenue is summed with Decimal, so the result does not depend on the
    order of the bundles.

    Args:
        bundles: StoreDataBundle instances or mappings with products and orders

    Returns:
        AggregateSummary: Product count, order count and revenue over all stores

    Raises:
        DataFormatError: products/orders is missing or not a list, or an
            order's total_price is missing or not a decimal number
    """
    total_products = 0
    total_orders = 0
    total_revenue = Decimal("0")

    for bundle in bundles:
        orders = _read_list(bundle, "orders")
        total_products += len(_read_list(bundle, "products"))
        total_orders += len(orders)
        for order in orders:
            total_revenue += parse_decimal(_read(order, "total_price"), field="total_price")

    return AggregateSummary(
        total_products=total_products,
        total_orders=total_orders,
        total_revenue=total_revenue
    )


def compare_stores(bundles: Iterable[Any]) -> List[StoreComparison]:
    """Product and order counts per store, for the analytics chart"""
    comparison = []
    for bundle in bundles:
        comparison.append(StoreComparison(
            shop_name=_read(_read(bundle, "shop"), "name"),
            store_url=_store_url(bundle),
            product_count=len(_read_list(bundle, "products")),
            order_count=len(_read_list(bundle, "orders"))
        ))
    return comparison


def product_rows(bundle: StoreDataBundle) -> List[ProductRow]:
    """Product table rows: title, first variant inventory and price"""
    rows = []
    for product in bundle.products:
        variant = product.variants[0]
        rows.append(ProductRow(
            title=product.title,
            # zero and unknown stock both read as N/A
            inventory=variant.inventory_quantity or "N/A",
            price=format_price(variant.price)
        ))
    return rows


def order_rows(bundle: StoreDataBundle) -> List[OrderRow]:
    """Order table rows: name, order date and total"""
    return [
        OrderRow(
            name=order.name,
            date=format_order_date(order.created_at),
            total=format_price(order.total_price)
        )
        for order in bundle.orders
    ]


def build_store_dashboard(bundle: StoreDataBundle) -> StoreDashboard:
    return StoreDashboard(
        store_url=bundle.store_url,
        shop=bundle.shop,
        products=product_rows(bundle),
        orders=order_rows(bundle)
    )
