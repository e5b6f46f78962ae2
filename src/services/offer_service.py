"""Offer service running the search-to-price pipeline for one request."""

import uuid
from typing import Any, Optional

import httpx
from structlog import get_logger

from src.clients import FeratelAPIClient
from src.config import settings
from src.models.offers import OffersResponse, StayRequest
from src.services.pipeline import OfferContext, Pipeline
from src.services.pipeline.steps import (
    AggregatePricesStep,
    AssembleOffersStep,
    EnrichProductNamesStep,
    FetchPriceMatrixStep,
    OpenSearchStep,
    ResolveProductsStep,
)
from src.services.product_resolver import ProductNameLookup, ProductResolver
from src.transformers import OccupancyTransformer

logger = get_logger(__name__)


def new_session_id() -> str:
    """Fresh DW-SessionId for one request."""
    return f"P{uuid.uuid4().hex}"


class OfferService:
    """Translate a stay request into Feratel calls and shape the offers."""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        """Initialize the service.

        Args:
            http_client: Optional shared HTTP client; by default each request
                opens and closes its own
        """
        self.http_client = http_client

    def build_pipeline(self, client: FeratelAPIClient) -> Pipeline:
        """Assemble the offer pipeline around a request-scoped client."""
        pipeline = Pipeline("offers", [
            OpenSearchStep(client),
            ResolveProductsStep(ProductResolver.default(client)),
        ])
        if settings.feratel.resolve_names:
            pipeline.add_step(EnrichProductNamesStep(ProductNameLookup.default(client)))
        return (
            pipeline.add_step(FetchPriceMatrixStep(client))
            .add_step(AggregatePricesStep())
            .add_step(AssembleOffersStep())
        )

    def resolve_session_id(self, stay: StayRequest) -> str:
        """Caller session first, then a configured fixed one, else a new UUID."""
        return stay.session_id or settings.feratel_fixed_session_id() or new_session_id()

    async def get_offers(self, body: Any) -> OffersResponse:
        """Run the full pipeline for a raw request body.

        Args:
            body: Decoded JSON body of the offers endpoint

        Returns:
            Offers (plus debug trace when requested)

        Raises:
            ValidationError: Invalid input, before any backend call
            NotFoundError: No products could be resolved
            UpstreamError: Search or price matrix failed
        """
        stay = OccupancyTransformer.transform(body)
        session_id = self.resolve_session_id(stay)
        context = OfferContext(stay, session_id)

        logger.info("Offer request received", session_id=session_id, **stay.summary())

        async with FeratelAPIClient(session_id, http_client=self.http_client) as client:
            await self.build_pipeline(client).execute(context)

        logger.info(
            "Offer request complete",
            session_id=session_id,
            offers=len(context.offers),
            available=sum(1 for offer in context.offers if offer.availability),
        )

        debug = context.get_results() if stay.debug and settings.api.expose_debug else None
        return OffersResponse(offers=context.offers, debug=debug)
