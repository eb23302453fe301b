import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from store_dashboard.services.credential_store import CredentialStore


def make_order(name, total_price, created_at="2024-06-10T14:30:00-04:00"):
    return {
        "id": abs(hash(name)) % 100000,
        "name": name,
        "created_at": created_at,
        "total_price": total_price,
        "currency": "USD",
        "line_items": [{"title": "Widget", "quantity": 1, "price": total_price}],
    }


def make_product(title, price="19.99", inventory_quantity=5):
    variant = {"id": 1, "title": "Default Title", "price": price}
    if inventory_quantity is not None:
        variant["inventory_quantity"] = inventory_quantity
    return {"id": 2, "title": title, "vendor": "Acme", "variants": [variant]}


def make_bundle(store_url, shop_name, products=(), orders=()):
    return {
        "shop": {"name": shop_name, "domain": store_url, "currency": "USD"},
        "products": list(products),
        "orders": list(orders),
        "storeUrl": store_url,
    }


@pytest.fixture
def first_store_bundle():
    return make_bundle(
        "first.myshopify.com", "First Store",
        products=[make_product("A"), make_product("B")],
        orders=[make_order("#1001", "10.50"), make_order("#1002", "5.25")],
    )


@pytest.fixture
def second_store_bundle():
    return make_bundle(
        "second.myshopify.com", "Second Store",
        products=[make_product("C", price="7.00", inventory_quantity=None)],
        orders=[make_order("#2001", "1.00")],
    )


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def credential_store(session_factory):
    return CredentialStore(session_factory)
