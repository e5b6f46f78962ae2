"""Pipeline step implementations, in execution order."""

from .open_search_step import OpenSearchStep
from .resolve_products_step import ResolveProductsStep
from .enrich_product_names_step import EnrichProductNamesStep
from .fetch_price_matrix_step import FetchPriceMatrixStep
from .aggregate_prices_step import AggregatePricesStep
from .assemble_offers_step import AssembleOffersStep

__all__ = [
    "OpenSearchStep",
    "ResolveProductsStep",
    "EnrichProductNamesStep",
    "FetchPriceMatrixStep",
    "AggregatePricesStep",
    "AssembleOffersStep",
]
