"""Step to fetch the price matrix of the resolved products."""

from typing import Any

from src.clients import FeratelAPIClient, FeratelAPIClientError
from src.config import settings
from src.exceptions import UpstreamError
from src.models.feratel import PriceMatrixRequest, PriceMatrixRow
from src.models.offers import PriceMatrixRanges
from src.services.pipeline import OfferContext, PipelineStep
from src.transformers import PriceMatrixTransformer

EXACT_RANGES = PriceMatrixRanges(arrival_range=0, nights_range=0)


class FetchPriceMatrixStep(PipelineStep):
    """Query the price matrix, windowed first, then exact.

    The windowed attempt mirrors the booking UI. When its answer is an error,
    not a list, empty, only placeholder rows, or rows without buckets, the
    query is repeated once with exact ranges (0/0).
    """

    def __init__(self, client: FeratelAPIClient):
        """Initialize the step.

        Args:
            client: Feratel API client bound to the request session
        """
        super().__init__("FetchPriceMatrix")
        self.client = client

    def build_request(self, context: OfferContext, ranges: PriceMatrixRanges) -> PriceMatrixRequest:
        """Price matrix payload for the context's stay and products."""
        totals = context.stay.totals
        return PriceMatrixRequest(
            product_ids=list(dict.fromkeys(context.product_ids)),
            from_date=context.stay.arrival,
            nights=context.nights,
            units=totals.total_units,
            adults=totals.total_adults,
            children_ages=totals.all_child_ages,
            currency=settings.feratel.currency,
            arrival_range=ranges.arrival_range,
            nights_range=ranges.nights_range,
        )

    async def _attempt(
        self,
        context: OfferContext,
        ranges: PriceMatrixRanges,
        label: str,
    ) -> tuple[list[PriceMatrixRow], Any]:
        """One price matrix call; returns parsed rows and the raw body."""
        request = self.build_request(context, ranges)
        try:
            data = await self.client.get_price_matrix(request)
        except FeratelAPIClientError as e:
            context.add_trace(label, status=e.status_code, error=str(e), payload=request.to_feratel_dict())
            body = e.response_body if e.response_body is not None else str(e)
            return [], body

        rows = PriceMatrixTransformer.parse_rows(data)
        context.add_trace(
            label,
            payload=request.to_feratel_dict(),
            rows=len(rows),
            preview=data[:1] if isinstance(data, list) else data,
        )
        return rows, data

    async def execute(self, context: OfferContext) -> bool:
        """Fetch and keep usable price matrix rows.

        Raises:
            UpstreamError: When neither attempt produced usable rows
        """
        windowed = context.stay.ranges or PriceMatrixRanges(
            arrival_range=settings.price_matrix.arrival_range,
            nights_range=settings.price_matrix.nights_range,
        )

        rows, data = await self._attempt(context, windowed, "pricematrix")
        attempts = 1

        if not PriceMatrixTransformer.is_usable(rows) and windowed != EXACT_RANGES:
            self.logger.info(
                "Windowed price matrix unusable, retrying with exact ranges",
                session_id=context.session_id,
                rows=len(rows),
            )
            rows, data = await self._attempt(context, EXACT_RANGES, "pricematrix-0-0")
            attempts += 1

        context.stats["price_matrix"] = {"attempts": attempts, "rows": len(rows)}

        if not PriceMatrixTransformer.is_usable(rows):
            raise UpstreamError(
                "pricematrix",
                "Price matrix not available",
                details=data,
                request_summary=context.stay.summary(),
            )

        context.price_rows = rows
        return True
