"""Data transformation package."""

from src.transformers.occupancy_transformer import OccupancyTransformer
from src.transformers.offer_transformer import OfferTransformer
from src.transformers.price_matrix_transformer import PriceMatrixTransformer
from src.transformers.response_decoder import ResponseDecoder

__all__ = [
    "OccupancyTransformer",
    "OfferTransformer",
    "PriceMatrixTransformer",
    "ResponseDecoder",
]
