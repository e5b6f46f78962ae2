"""Feratel Deskline API request/response models."""

from src.models.feratel.price_matrix import (
    AdditionalService,
    DayPriceEntry,
    PriceMatrixRequest,
    PriceMatrixRow,
)
from src.models.feratel.product import ProductRef, is_sentinel_product_id
from src.models.feratel.search import SearchLine, SearchRequest

__all__ = [
    "AdditionalService",
    "DayPriceEntry",
    "PriceMatrixRequest",
    "PriceMatrixRow",
    "ProductRef",
    "is_sentinel_product_id",
    "SearchLine",
    "SearchRequest",
]
