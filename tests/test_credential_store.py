import pytest

from store_dashboard.exceptions import ConfigurationError
from store_dashboard.models.database import StoreConnection
from store_dashboard.models.schemas import StoreCredential


def creds(*urls):
    return [StoreCredential(url=url, access_token=f"token-{i}") for i, url in enumerate(urls)]


def test_empty_store_loads_nothing(credential_store):
    assert credential_store.load() == []


def test_add_keeps_insertion_order(credential_store):
    credential_store.add(creds("b.myshopify.com", "a.myshopify.com"))
    credential_store.add(creds("c.myshopify.com"))

    assert [c.url for c in credential_store.load()] == [
        "b.myshopify.com", "a.myshopify.com", "c.myshopify.com"
    ]


def test_save_replaces_the_list(credential_store):
    credential_store.add(creds("old.myshopify.com"))

    assert credential_store.save(creds("new.myshopify.com")) == 1
    assert [c.url for c in credential_store.load()] == ["new.myshopify.com"]


def test_duplicates_are_kept_and_removed_together(credential_store):
    credential_store.add(creds("dup.myshopify.com", "keep.myshopify.com", "dup.myshopify.com"))

    assert len(credential_store.load()) == 3
    assert credential_store.remove("https://dup.myshopify.com/") == 2
    assert [c.url for c in credential_store.load()] == ["keep.myshopify.com"]


def test_remove_unknown_store(credential_store):
    assert credential_store.remove("missing.myshopify.com") == 0


def test_tokens_round_trip(credential_store):
    credential_store.add([StoreCredential(url="t.myshopify.com", access_token="shpat_abc")])

    assert credential_store.load()[0].access_token == "shpat_abc"
    assert credential_store.list_connections()[0].connected_at is not None


def test_blank_stored_token_is_a_configuration_error(credential_store, session_factory):
    db = session_factory()
    db.add(StoreConnection(url="blank.myshopify.com", access_token=""))
    db.commit()
    db.close()

    with pytest.raises(ConfigurationError):
        credential_store.load()


def test_urls_are_stored_as_entered_and_removed_by_host(credential_store):
    credential_store.add(creds("https://Dup.myshopify.com/", "keep.myshopify.com"))

    assert [c.url for c in credential_store.load()] == ["https://Dup.myshopify.com/", "keep.myshopify.com"]
    assert credential_store.remove("dup.myshopify.com") == 1
    assert [c.url for c in credential_store.load()] == ["keep.myshopify.com"]
