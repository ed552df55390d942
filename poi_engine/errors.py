"""
Error taxonomy for POI search and route write-back.

Routers translate these into HTTP status codes; everything below the router
layer raises them directly.
"""
from typing import Optional


class InvalidInputError(ValueError):
    """Request rejected before any external call was made."""


class UnknownProviderError(KeyError):
    """No provider registered under the requested id."""

    def __init__(self, provider_id: str):
        super().__init__(provider_id)
        self.provider_id = provider_id

    def __str__(self) -> str:
        return f"Unknown POI provider: {self.provider_id}"


class ProviderError(RuntimeError):
    """A provider request failed as a whole (transport, HTTP status, payload)."""

    def __init__(self, provider_id: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{provider_id}: {message}")
        self.provider_id = provider_id
        self.status_code = status_code


class NoPOIsFound(Exception):
    """A provider answered successfully but matched nothing."""

    def __init__(self, provider_id: str, message: str = "No POIs found"):
        super().__init__(message)
        self.provider_id = provider_id
        self.message = message


class RouteStoreError(RuntimeError):
    """The remote route store could not be read or written."""

    def __init__(self, route_id: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"route {route_id}: {message}")
        self.route_id = route_id
        self.status_code = status_code


class WriteBackError(RuntimeError):
    """A commit was aborted; the remote POI list was not replaced."""

    def __init__(self, route_id: str, stage: str, cause: Exception):
        super().__init__(f"Write-back to route {route_id} failed during {stage}: {cause}")
        self.route_id = route_id
        self.stage = stage
        self.cause = cause


class InvalidTransitionError(ValueError):
    """A marker state change outside the allowed transition table."""
