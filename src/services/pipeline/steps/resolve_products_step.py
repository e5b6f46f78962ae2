"""Step to resolve the bookable products of the search."""

from src.exceptions import NotFoundError
from src.services.pipeline import OfferContext, PipelineStep
from src.services.product_resolver import ProductResolver


class ResolveProductsStep(PipelineStep):
    """Run the product discovery chain."""

    def __init__(self, resolver: ProductResolver):
        """Initialize the step.

        Args:
            resolver: Ordered product discovery chain
        """
        super().__init__("ResolveProducts")
        self.resolver = resolver

    async def execute(self, context: OfferContext) -> bool:
        """Resolve products into the context.

        Raises:
            NotFoundError: When every strategy came back empty
        """
        products, strategy = await self.resolver.resolve(context)
        if not products:
            raise NotFoundError("No products found for given search")

        context.products = products
        context.product_source = strategy.name if strategy else None
        context.stats["products"] = {
            "source": context.product_source,
            "count": len(products),
            "named": sum(1 for p in products if p.display_name),
        }
        return True
