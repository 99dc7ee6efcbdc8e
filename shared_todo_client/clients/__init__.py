"""HTTP clients."""

from .api import ApiError, TodoApiClient

__all__ = ["TodoApiClient", "ApiError"]
