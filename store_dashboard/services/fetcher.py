"""
Concurrent fetch across connected stores.

One task per credential, joined with asyncio.gather so results come back in
input order. The first store that fails aborts the whole operation: its
sibling tasks are cancelled and a FetchFailure naming that store is raised.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from store_dashboard.config import settings
from store_dashboard.exceptions import ConfigurationError, FetchFailure
from store_dashboard.models.schemas import StoreCredential, StoreDataBundle, validate_bundle
from store_dashboard.services.shopify_client import ShopifyClient

logger = logging.getLogger(__name__)

StoreFetcher = Callable[[StoreCredential], Awaitable[Union[StoreDataBundle, Mapping[str, Any]]]]
CredentialInput = Union[StoreCredential, Mapping[str, Any]]


def to_credential(entry: CredentialInput) -> StoreCredential:
    """Validate one credential entry; missing url or token is a ConfigurationError"""
    if isinstance(entry, StoreCredential):
        return entry
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"Store credential must be an object, got {type(entry).__name__}")

    try:
        return StoreCredential.model_validate(dict(entry))
    except ValidationError as e:
        problems = ", ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        raise ConfigurationError(f"Invalid store credential ({problems})")


def normalize_credentials(credentials: Union[CredentialInput, Iterable[CredentialInput], None]) -> List[StoreCredential]:
    """Wrap a single credential into a list and validate every entry"""
    if credentials is None:
        return []
    if isinstance(credentials, (StoreCredential, Mapping)):
        credentials = [credentials]
    return [to_credential(entry) for entry in credentials]


async def fetch_all(credentials: Union[CredentialInput, Iterable[CredentialInput], None],
                    fetch_store: Optional[StoreFetcher] = None,
                    max_concurrency: Optional[int] = None) -> List[StoreDataBundle]:
    """
    Fetch every store's data concurrently

    Args:
        credentials: One credential or a sequence of them
        fetch_store: Per-store upstream call, defaults to ShopifyClient.fetch_store_data
        max_concurrency: Cap on in-flight stores; None uses the configured value,
            0 means no cap

    Returns:
        List[StoreDataBundle]: One bundle per credential, in input order

    Raises:
        ConfigurationError: A credential entry is empty or malformed
        FetchFailure: Any single store failed; no partial results are returned
    """
    stores = normalize_credentials(credentials)
    if not stores:
        return []

    if fetch_store is None:
        fetch_store = ShopifyClient().fetch_store_data

    if max_concurrency is None:
        max_concurrency = settings.MAX_CONCURRENT_FETCHES
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency and max_concurrency > 0 else None

    async def fetch_one(store: StoreCredential) -> StoreDataBundle:
        try:
            if semaphore is None:
                result = await fetch_store(store)
            else:
                async with semaphore:
                    result = await fetch_store(store)
            return validate_bundle(result, store_url=store.url)
        except Exception as e:
            logger.error(f"Error fetching Shopify data for store {store.url}: {e}")
            raise FetchFailure(store.url, e) from e

    logger.info(f"Fetching data for {len(stores)} store(s)")

    tasks = [asyncio.ensure_future(fetch_one(store)) for store in stores]
    try:
        bundles = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    logger.info(f"Fetched data for {len(bundles)} store(s)")
    return list(bundles)
