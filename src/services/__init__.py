"""Business services package."""

from src.services.offer_service import OfferService

__all__ = [
    "OfferService",
]
