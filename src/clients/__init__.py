"""API clients package."""

from src.clients.feratel_client import (
    FeratelAPIAuthenticationError,
    FeratelAPIClient,
    FeratelAPIClientError,
    FeratelAPINotFoundError,
    FeratelAPIServerError,
)

__all__ = [
    "FeratelAPIClient",
    "FeratelAPIClientError",
    "FeratelAPIAuthenticationError",
    "FeratelAPINotFoundError",
    "FeratelAPIServerError",
]
