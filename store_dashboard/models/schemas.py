from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Dict, Any, Union
from datetime import datetime
from decimal import Decimal

from store_dashboard.exceptions import DataFormatError
from store_dashboard.utils.helpers import normalize_store_url


class CamelModel(BaseModel):
    """Models exchanged with the dashboard client use camelCase JSON names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _number_to_str(v):
    if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
        return str(v)
    return v


# Upstream Shopify records. Only the fields the dashboard reads are declared;
# everything else the platform sends is kept as extra data.
class ShopInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    domain: str


class Variant(BaseModel):
    model_config = ConfigDict(extra="allow")

    price: str
    inventory_quantity: Optional[int] = None

    @field_validator('price', mode='before')
    @classmethod
    def coerce_price(cls, v):
        return _number_to_str(v)


class Product(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str
    variants: List[Variant]

    @field_validator('variants')
    @classmethod
    def validate_variants(cls, v):
        if not v:
            raise ValueError("product must have at least one variant")
        return v


class Order(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    created_at: datetime
    # Parsed by the aggregator so a bad amount fails there, not here
    total_price: str
    line_items: List[Dict[str, Any]]

    @field_validator('total_price', mode='before')
    @classmethod
    def coerce_total_price(cls, v):
        return _number_to_str(v)


class StoreCredential(CamelModel):
    url: str
    access_token: str

    # Kept as entered: it is the key callers use to find their bundle
    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        if not normalize_store_url(v):
            raise ValueError("store url is required")
        return v

    @field_validator('access_token')
    @classmethod
    def validate_access_token(cls, v):
        if not v or not v.strip():
            raise ValueError("access token is required")
        return v.strip()


class StoreDataBundle(CamelModel):
    shop: ShopInfo
    products: List[Product] = []
    orders: List[Order] = []
    # stamped by the fan-out from the credential
    store_url: str = ""


class AggregateSummary(CamelModel):
    total_products: int = 0
    total_orders: int = 0
    total_revenue: Decimal = Decimal("0")


# Dashboard / analytics views
class StoreComparison(CamelModel):
    shop_name: str
    store_url: str
    product_count: int
    order_count: int


class ProductRow(BaseModel):
    title: str
    inventory: Union[int, str]
    price: str


class OrderRow(BaseModel):
    name: str
    date: str
    total: str


class StoreDashboard(CamelModel):
    store_url: str
    shop: ShopInfo
    products: List[ProductRow] = []
    orders: List[OrderRow] = []


class DashboardResponse(CamelModel):
    summary: AggregateSummary
    stores: List[StoreDashboard] = []


class AnalyticsResponse(CamelModel):
    stores: List[StoreComparison] = []
    generated_at: datetime = Field(default_factory=datetime.now)


# API requests / responses
class StoreConnectionRequest(BaseModel):
    stores: List[StoreCredential]

    @field_validator('stores')
    @classmethod
    def validate_stores(cls, v):
        if not v:
            raise ValueError("at least one store is required")
        return v


class DashboardRequest(BaseModel):
    stores: List[StoreCredential] = []


class ConnectedStore(CamelModel):
    url: str
    access_token: str
    connected_at: Optional[datetime] = None


class ErrorResponse(BaseModel):
    error: str
    message: str
    status_code: int
    timestamp: datetime = Field(default_factory=datetime.now)


class SuccessResponse(BaseModel):
    success: bool = True
    data: Any = None
    message: str = "OK"


def data_format_error(exc: ValidationError) -> DataFormatError:
    """Turn the first pydantic validation error into a DataFormatError"""
    errors = exc.errors()
    if not errors:
        return DataFormatError("record", str(exc))

    first = errors[0]
    names = [part for part in first.get("loc", ()) if isinstance(part, str)]
    field = names[-1] if names else "record"
    return DataFormatError(field, first.get("msg", "invalid value"))


def validate_bundle(data: Any, store_url: Optional[str] = None) -> StoreDataBundle:
    """
    Validate a raw per-store payload into a StoreDataBundle

    Args:
        data: StoreDataBundle or mapping with shop/products/orders
        store_url: Overrides the payload's storeUrl when given

    Raises:
        DataFormatError: If the payload does not have the expected shape
    """
    if isinstance(data, StoreDataBundle):
        if store_url is not None and data.store_url != store_url:
            return data.model_copy(update={"store_url": store_url})
        return data

    if not isinstance(data, dict):
        raise DataFormatError("bundle", f"expected an object, got {type(data).__name__}")

    payload = dict(data)
    if store_url is not None:
        payload.pop("storeUrl", None)
        payload["store_url"] = store_url

    try:
        return StoreDataBundle.model_validate(payload)
    except ValidationError as e:
        raise data_format_error(e)
