"""Transformer joining resolved products with aggregated prices."""

from structlog import get_logger

from src.config import settings
from src.models.feratel import ProductRef
from src.models.offers import Offer, ProductAggregate

logger = get_logger(__name__)


class OfferTransformer:
    """Assemble the offer list returned to callers."""

    @staticmethod
    def assemble(
        products: list[ProductRef],
        aggregates: dict[str, ProductAggregate],
        nights: int,
    ) -> list[Offer]:
        """One offer per resolved product, in resolution order.

        Products without pricing still appear, unpriced and unavailable.

        Args:
            products: Resolved products
            aggregates: Aggregated prices keyed by product id
            nights: Requested night count

        Returns:
            List of offers
        """
        offers = []
        unpriced = 0
        for product in products:
            aggregate = aggregates.get(product.product_id)
            if aggregate is None:
                unpriced += 1
                aggregate = ProductAggregate(nights=nights)
            offers.append(
                Offer(
                    product_id=product.product_id,
                    name=product.display_name or "",
                    total_price=max(aggregate.total_price, 0.0),
                    currency=settings.feratel.currency,
                    availability=aggregate.available,
                    nights=nights,
                )
            )

        if unpriced:
            logger.warning("Products without price matrix rows", count=unpriced)
        return offers
