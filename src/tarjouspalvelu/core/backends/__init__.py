"""Transport backends for talking to the portal."""

from .base import (
    Backend,
    BackendError,
    FetchError,
    FetchResult,
    RequestSpec,
)
from .http_backend import HttpBackend

__all__ = [
    "Backend",
    "RequestSpec",
    "FetchResult",
    "BackendError",
    "FetchError",
    "HttpBackend",
]
