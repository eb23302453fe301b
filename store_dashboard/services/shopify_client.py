import asyncio
import json
import logging
from typing import Optional, Dict, Any

import aiohttp
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from store_dashboard.config import settings
from store_dashboard.exceptions import DataFormatError
from store_dashboard.models.schemas import StoreCredential, StoreDataBundle, validate_bundle
from store_dashboard.utils.helpers import normalize_store_url

logger = logging.getLogger(__name__)


class ShopifyClient:
    """Per-store client for the Shopify Admin REST API"""

    RESOURCES = {
        "shop": "/shop.json",
        "products": "/products.json",
        "orders": "/orders.json",
    }

    def __init__(self, api_version: Optional[str] = None, timeout: Optional[float] = None):
        self.api_version = api_version or settings.SHOPIFY_API_VERSION
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT

    def base_url(self, store_url: str) -> str:
        return f"https://{normalize_store_url(store_url)}/admin/api/{self.api_version}"

    def _headers(self, access_token: str) -> Dict[str, str]:
        return {
            'Content-Type': 'application/json',
            settings.SHOPIFY_TOKEN_HEADER: access_token,
        }

    async def _get_json(self, session: aiohttp.ClientSession, url: str) -> Dict[str, Any]:
        """GET a JSON document; non-2xx responses raise ClientResponseError"""
        async with session.get(url) as response:
            response.raise_for_status()
            try:
                data = await response.json(content_type=None)
            except (json.JSONDecodeError, aiohttp.ContentTypeError) as e:
                raise DataFormatError("body", f"response from {url} is not valid JSON: {e}")

        if not isinstance(data, dict):
            raise DataFormatError("body", f"response from {url} is not a JSON object")
        return data

    async def fetch_store_data(self, credential: StoreCredential) -> StoreDataBundle:
        """
        Fetch shop metadata, products and orders for one store

        The three resources are requested concurrently on a single session.

        Args:
            credential: Store URL and Admin API access token

        Returns:
            StoreDataBundle: Validated bundle stamped with the credential's url

        Raises:
            aiohttp.ClientError: Network failure or non-success status
            DataFormatError: Payload is not shaped like Shopify's responses
        """
        base_url = self.base_url(credential.url)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        logger.info(f"Fetching Shopify data for store: {credential.url}")

        async with aiohttp.ClientSession(headers=self._headers(credential.access_token),
                                         timeout=timeout) as session:
            documents = await asyncio.gather(*[
                self._get_json(session, base_url + path) for path in self.RESOURCES.values()
            ])

        payload = {}
        for key, document in zip(self.RESOURCES, documents):
            if key not in document:
                raise DataFormatError(key, f"missing from {self.RESOURCES[key]} response")
            payload[key] = document[key]

        bundle = validate_bundle(payload, store_url=credential.url)
        logger.info(
            f"Fetched {len(bundle.products)} products, {len(bundle.orders)} orders from {credential.url}")
        return bundle

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        retry_strategy = Retry(
            total=settings.VERIFY_MAX_RETRIES,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def verify_access(self, credential: StoreCredential) -> bool:
        """Check that the access token can read the store's shop resource"""
        url = self.base_url(credential.url) + self.RESOURCES["shop"]
        session = self._create_session()
        try:
            response = session.get(url, headers=self._headers(credential.access_token),
                                   timeout=self.timeout)
            response.raise_for_status()
            return "shop" in response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Access check failed for {credential.url}: {e}")
            return False
        finally:
            session.close()
