"""Step to build the offer list."""

from src.services.pipeline import OfferContext, PipelineStep
from src.transformers import OfferTransformer


class AssembleOffersStep(PipelineStep):
    """Join resolved products with their aggregates."""

    def __init__(self):
        super().__init__("AssembleOffers")

    async def execute(self, context: OfferContext) -> bool:
        context.offers = OfferTransformer.assemble(
            context.products,
            context.aggregates,
            context.nights,
        )
        context.stats["offers"] = len(context.offers)
        return True
