"""Step to look up display names for products resolved without them."""

from src.services.pipeline import OfferContext, PipelineStep
from src.services.product_resolver import ProductNameLookup


class EnrichProductNamesStep(PipelineStep):
    """Fill empty product names. Optional: offers go out nameless on failure."""

    def __init__(self, lookup: ProductNameLookup):
        super().__init__("EnrichProductNames")
        self.lookup = lookup

    async def execute(self, context: OfferContext) -> bool:
        if all(product.display_name for product in context.products):
            return True

        names = await self.lookup.lookup(context)
        context.products = [
            product.model_copy(update={"display_name": names[product.product_id]})
            if not product.display_name and product.product_id in names
            else product
            for product in context.products
        ]
        self.logger.info(
            "Product names resolved",
            session_id=context.session_id,
            named=len(names),
            products=len(context.products),
        )
        return True

    def is_required(self) -> bool:
        """Names are cosmetic; a failed lookup never fails the request.

        Returns:
            False
        """
        return False
