import logging
from functools import lru_cache
from typing import List

from fastapi import APIRouter, HTTPException, status, Depends
from fastapi.concurrency import run_in_threadpool

from store_dashboard.exceptions import DashboardError, FetchFailure
from store_dashboard.models.schemas import (
    AnalyticsResponse, ConnectedStore, DashboardRequest, DashboardResponse,
    StoreConnectionRequest, StoreCredential, StoreDataBundle, SuccessResponse
)
from store_dashboard.services.aggregator import aggregate, build_store_dashboard, compare_stores
from store_dashboard.services.credential_store import CredentialStore
from store_dashboard.services.fetcher import StoreFetcher, fetch_all
from store_dashboard.services.shopify_client import ShopifyClient
from store_dashboard.utils.helpers import mask_token

logger = logging.getLogger(__name__)
router = APIRouter()


# Dependency injection for services
def get_shopify_client() -> ShopifyClient:
    return ShopifyClient()


def get_store_fetcher(client: ShopifyClient = Depends(get_shopify_client)) -> StoreFetcher:
    return client.fetch_store_data


@lru_cache
def get_credential_store() -> CredentialStore:
    return CredentialStore()


def _masked(connections: List[ConnectedStore]) -> List[dict]:
    return [
        connection.model_copy(update={"access_token": mask_token(connection.access_token)})
        .model_dump(by_alias=True, mode="json")
        for connection in connections
    ]


def _build_dashboard(bundles: List[StoreDataBundle]) -> DashboardResponse:
    return DashboardResponse(
        summary=aggregate(bundles),
        stores=[build_store_dashboard(bundle) for bundle in bundles]
    )


@router.post("/shopify", response_model=StoreDataBundle)
async def fetch_store(
        credential: StoreCredential,
        client: ShopifyClient = Depends(get_shopify_client)
):
    """
    Fetch shop, products and orders for a single store

    **Parameters:**
    - url: The store's myshopify domain
    - accessToken: Admin API access token

    **Error Codes:**
    - 502: The store could not be fetched or returned malformed data
    """
    try:
        return await client.fetch_store_data(credential)
    except Exception as e:
        logger.error(f"Error fetching Shopify data for store {credential.url}: {e}")
        raise FetchFailure(credential.url, e) from e


@router.get("/stores")
async def list_stores(store: CredentialStore = Depends(get_credential_store)):
    """List connected stores (access tokens are masked)"""
    connections = store.list_connections()
    return {
        "success": True,
        "data": _masked(connections),
        "total": len(connections),
        "message": f"Retrieved {len(connections)} connected stores"
    }


@router.post("/stores", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
async def connect_stores(
        request: StoreConnectionRequest,
        verify: bool = False,
        store: CredentialStore = Depends(get_credential_store),
        client: ShopifyClient = Depends(get_shopify_client)
):
    """
    Connect one or more stores

    **Parameters:**
    - stores: List of {url, accessToken}
    - verify: Check each token against the store before saving (default: False)

    **Error Codes:**
    - 401: A store rejected its access token (only with verify=true)
    """
    if verify:
        for credential in request.stores:
            if not await run_in_threadpool(client.verify_access, credential):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail=f"Store {credential.url} is not accessible with the given access token"
                )

    count = store.add(request.stores)
    return SuccessResponse(
        data=_masked(store.list_connections()),
        message=f"Connected {count} stores"
    )


@router.delete("/stores", response_model=SuccessResponse)
async def disconnect_store(url: str, store: CredentialStore = Depends(get_credential_store)):
    """Disconnect every entry for the given store url"""
    removed = store.remove(url)
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Store {url} is not connected"
        )

    return SuccessResponse(data={"removed": removed}, message=f"Disconnected {url}")


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
        store: CredentialStore = Depends(get_credential_store),
        fetch_store: StoreFetcher = Depends(get_store_fetcher)
):
    """
    Aggregated totals plus shop, product and order tables for every connected store

    **Error Codes:**
    - 404: No stores are connected
    - 502: One of the stores could not be fetched (no partial results)
    """
    try:
        credentials = store.load()
        if not credentials:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No stores connected"
            )

        bundles = await fetch_all(credentials, fetch_store=fetch_store)
        logger.info(f"Built dashboard for {len(bundles)} stores")
        return _build_dashboard(bundles)

    except (HTTPException, DashboardError):
        raise
    except Exception as e:
        logger.error(f"Unexpected error building dashboard: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An internal error occurred while building the dashboard"
        )


@router.post("/dashboard", response_model=DashboardResponse)
async def build_dashboard(
        request: DashboardRequest,
        fetch_store: StoreFetcher = Depends(get_store_fetcher)
):
    """Same as GET /dashboard for credentials passed in the body; nothing is saved"""
    bundles = await fetch_all(request.stores, fetch_store=fetch_store)
    return _build_dashboard(bundles)


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
        store: CredentialStore = Depends(get_credential_store),
        fetch_store: StoreFetcher = Depends(get_store_fetcher)
):
    """Product and order counts per connected store"""
    try:
        credentials = store.load()
        if not credentials:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No stores connected"
            )

        bundles = await fetch_all(credentials, fetch_store=fetch_store)
        return AnalyticsResponse(stores=compare_stores(bundles))

    except (HTTPException, DashboardError):
        raise
    except Exception as e:
        logger.error(f"Unexpected error building analytics: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An internal error occurred while building analytics"
        )


@router.get("/health")
async def health_check():
    """Health check for the API routes"""
    return {
        "status": "healthy",
        "service": "Multi-Store Dashboard API",
        "endpoints_available": [
            "/shopify",
            "/stores",
            "/dashboard",
            "/analytics",
            "/health"
        ]
    }
