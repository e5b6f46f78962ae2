"""HTTP API package."""

from src.api.routes import get_offer_service, router

__all__ = ["router", "get_offer_service"]
