import asyncio

import pytest
import requests

from store_dashboard.exceptions import DataFormatError
from store_dashboard.models.schemas import StoreCredential
from store_dashboard.services.shopify_client import ShopifyClient
from tests.conftest import make_order, make_product

SHOP = {"shop": {"id": 1, "name": "Demo Store", "domain": "demo.myshopify.com"}}
PRODUCTS = {"products": [make_product("Tee"), make_product("Cap", price="12.00")]}
ORDERS = {"orders": [make_order("#1001", "24.00")]}


class RecordingClient(ShopifyClient):
    """Serves canned documents instead of calling the network"""

    def __init__(self, documents, **kwargs):
        super().__init__(**kwargs)
        self.documents = documents
        self.requested = []
        self.headers = None

    async def _get_json(self, session, url):
        self.requested.append(url)
        self.headers = dict(session.headers)
        return self.documents[url.rsplit("/", 1)[-1]]


@pytest.fixture
def demo_credential():
    return StoreCredential(url="demo.myshopify.com", access_token="shpat_secret")


def test_base_url_uses_api_version():
    client = ShopifyClient(api_version="2024-10")

    assert client.base_url("demo.myshopify.com") == "https://demo.myshopify.com/admin/api/2024-10"


def test_fetch_store_data_builds_bundle(demo_credential):
    client = RecordingClient(
        {"shop.json": SHOP, "products.json": PRODUCTS, "orders.json": ORDERS},
        api_version="2024-10",
    )

    bundle = asyncio.run(client.fetch_store_data(demo_credential))

    assert bundle.store_url == "demo.myshopify.com"
    assert bundle.shop.name == "Demo Store"
    assert [p.title for p in bundle.products] == ["Tee", "Cap"]
    assert bundle.orders[0].total_price == "24.00"
    assert sorted(client.requested) == [
        "https://demo.myshopify.com/admin/api/2024-10/orders.json",
        "https://demo.myshopify.com/admin/api/2024-10/products.json",
        "https://demo.myshopify.com/admin/api/2024-10/shop.json",
    ]
    assert client.headers["X-Shopify-Access-Token"] == "shpat_secret"


def test_missing_resource_key_is_a_data_error(demo_credential):
    client = RecordingClient({"shop.json": SHOP, "products.json": {}, "orders.json": ORDERS})

    with pytest.raises(DataFormatError) as exc_info:
        asyncio.run(client.fetch_store_data(demo_credential))

    assert exc_info.value.field == "products"


def test_upstream_errors_propagate(demo_credential):
    class FailingClient(ShopifyClient):
        async def _get_json(self, session, url):
            raise ConnectionError("connection reset")

    with pytest.raises(ConnectionError):
        asyncio.run(FailingClient().fetch_store_data(demo_credential))


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self.payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Client Error")

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers))
        return self.response

    def close(self):
        self.closed = True


def test_verify_access_accepts_readable_shop(monkeypatch, demo_credential):
    session = FakeSession(FakeResponse(200, SHOP))
    client = ShopifyClient(api_version="2024-10")
    monkeypatch.setattr(client, "_create_session", lambda: session)

    assert client.verify_access(demo_credential) is True
    url, headers = session.calls[0]
    assert url == "https://demo.myshopify.com/admin/api/2024-10/shop.json"
    assert headers["X-Shopify-Access-Token"] == "shpat_secret"
    assert session.closed


def test_verify_access_rejects_bad_token(monkeypatch, demo_credential):
    client = ShopifyClient()
    monkeypatch.setattr(client, "_create_session", lambda: FakeSession(FakeResponse(401, {"errors": "Invalid"})))

    assert client.verify_access(demo_credential) is False


def test_base_url_uses_bare_lowercase_host():
    client = ShopifyClient(api_version="2024-10")

    assert client.base_url("https://Demo.myshopify.com/") == "https://demo.myshopify.com/admin/api/2024-10"


def test_fetch_keeps_entered_url_on_bundle():
    client = RecordingClient(
        {"shop.json": SHOP, "products.json": PRODUCTS, "orders.json": ORDERS},
        api_version="2024-10",
    )
    credential = StoreCredential(url="https://Demo.myshopify.com/", access_token="shpat_secret")

    bundle = asyncio.run(client.fetch_store_data(credential))

    assert bundle.store_url == "https://Demo.myshopify.com/"
    assert "https://demo.myshopify.com/admin/api/2024-10/shop.json" in client.requested
