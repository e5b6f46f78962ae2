"""Price API request and offer models."""

from src.models.offers.offer import Offer, OffersResponse, ProductAggregate
from src.models.offers.stay import (
    OccupancyLine,
    OccupancyTotals,
    PriceMatrixRanges,
    StayRequest,
)

__all__ = [
    "Offer",
    "OffersResponse",
    "ProductAggregate",
    "OccupancyLine",
    "OccupancyTotals",
    "PriceMatrixRanges",
    "StayRequest",
]
