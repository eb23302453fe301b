"""
Error taxonomy for the store data layer.

Nothing here is recovered from locally; every error reaches the caller.
"""


class DashboardError(Exception):
    """Base class for all dashboard errors"""


class FetchFailure(DashboardError):
    """One store's upstream fetch failed, which aborts the whole fan-out"""

    def __init__(self, store_url: str, cause: BaseException):
        self.store_url = store_url
        self.cause = cause
        super().__init__(f"Failed to fetch Shopify data for store {store_url}: {cause}")


class DataFormatError(DashboardError):
    """A response or input record does not have the expected shape"""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid value for '{field}': {reason}")


class ConfigurationError(DashboardError):
    """Empty or malformed store credential entries"""
