"""Step to reduce price matrix rows to per-product totals."""

from src.services.pipeline import OfferContext, PipelineStep
from src.transformers import PriceMatrixTransformer


class AggregatePricesStep(PipelineStep):
    """Aggregate total price and priced nights per product."""

    def __init__(self):
        super().__init__("AggregatePrices")

    async def execute(self, context: OfferContext) -> bool:
        context.aggregates = PriceMatrixTransformer.aggregate(
            context.price_rows,
            context.nights,
            arrival=context.stay.arrival,
        )
        context.stats["aggregates"] = {
            "products": len(context.aggregates),
            "available": sum(1 for a in context.aggregates.values() if a.available),
        }
        return True
