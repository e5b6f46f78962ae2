"""Ordered product discovery strategies for a search."""

from abc import ABC, abstractmethod

from structlog import get_logger

from src.clients import FeratelAPIClient, FeratelAPIClientError
from src.config import settings
from src.models.feratel import ProductRef
from src.services.pipeline import OfferContext
from src.transformers import ResponseDecoder

logger = get_logger(__name__)


class ProductDiscoveryStrategy(ABC):
    """One way of finding the bookable products of a search.

    ``discover`` returns an empty list when the strategy has nothing to
    offer; backend errors propagate and are handled by the resolver.
    """

    name: str = "strategy"

    @abstractmethod
    async def discover(self, context: OfferContext) -> list[ProductRef]:
        pass


class OverrideProductsStrategy(ProductDiscoveryStrategy):
    """Product ids sent by the caller, used verbatim (duplicates included)."""

    name = "override"

    async def discover(self, context: OfferContext) -> list[ProductRef]:
        return [ProductRef(product_id=pid) for pid in context.stay.product_ids or []]


class ConfiguredProductsStrategy(ProductDiscoveryStrategy):
    """Operator list from FERATEL_PRODUCT_IDS."""

    name = "configured"

    async def discover(self, context: OfferContext) -> list[ProductRef]:
        return ResponseDecoder.ids_to_product_refs(settings.configured_product_ids())


class SearchServicesStrategy(ProductDiscoveryStrategy):
    """Services (rooms) listed for the search."""

    name = "services"

    def __init__(self, client: FeratelAPIClient):
        self.client = client

    async def discover(self, context: OfferContext) -> list[ProductRef]:
        if not context.search_id:
            return []
        data = await self.client.get_search_services(context.search_id)
        return ResponseDecoder.to_product_refs(ResponseDecoder.pluck_items(data))


class PackagesStrategy(ProductDiscoveryStrategy):
    """Products nested in the packages of the accommodation."""

    name = "packages"

    def __init__(self, client: FeratelAPIClient):
        self.client = client

    async def discover(self, context: OfferContext) -> list[ProductRef]:
        if not context.search_id:
            return []
        data = await self.client.get_packages(context.search_id)
        return ResponseDecoder.to_product_refs(ResponseDecoder.iter_nested_products(data))


class AccommodationProductsStrategy(ProductDiscoveryStrategy):
    """Products embedded in the accommodation detail."""

    name = "accommodation"

    def __init__(self, client: FeratelAPIClient):
        self.client = client

    async def discover(self, context: OfferContext) -> list[ProductRef]:
        data = await self.client.get_accommodation_products()
        return ResponseDecoder.to_product_refs(ResponseDecoder.iter_nested_products(data))


class FallbackProductsStrategy(ProductDiscoveryStrategy):
    """Last-resort known-good ids from FERATEL_FALLBACK_PRODUCT_IDS."""

    name = "fallback"

    async def discover(self, context: OfferContext) -> list[ProductRef]:
        return ResponseDecoder.ids_to_product_refs(settings.fallback_product_ids())


class ProductResolver:
    """Try discovery strategies in order until one yields products.

    Never raises for backend failures: a failing strategy is logged and the
    next one is tried. An exhausted chain returns an empty list.
    """

    def __init__(self, strategies: list[ProductDiscoveryStrategy]):
        self.strategies = strategies

    @classmethod
    def default(cls, client: FeratelAPIClient) -> "ProductResolver":
        """Build the standard chain: override, configured, services,
        packages, accommodation, fallback."""
        return cls([
            OverrideProductsStrategy(),
            ConfiguredProductsStrategy(),
            SearchServicesStrategy(client),
            PackagesStrategy(client),
            AccommodationProductsStrategy(client),
            FallbackProductsStrategy(),
        ])

    async def resolve(self, context: OfferContext) -> tuple[list[ProductRef], ProductDiscoveryStrategy | None]:
        """Resolve products for the context's search.

        Args:
            context: Pipeline context with stay and search id

        Returns:
            Products and the strategy that produced them (None when exhausted)
        """
        for strategy in self.strategies:
            try:
                products = await strategy.discover(context)
            except FeratelAPIClientError as e:
                logger.warning(
                    "Product discovery strategy failed",
                    session_id=context.session_id,
                    strategy=strategy.name,
                    status_code=e.status_code,
                    error=str(e),
                )
                context.add_trace(
                    f"products/{strategy.name}", status=e.status_code, count=0, error=str(e)
                )
                continue

            context.add_trace(f"products/{strategy.name}", count=len(products))
            if products:
                logger.info(
                    "Products resolved",
                    session_id=context.session_id,
                    strategy=strategy.name,
                    count=len(products),
                )
                return products, strategy

        logger.warning("All product discovery strategies exhausted", session_id=context.session_id)
        return [], None


class ProductNameLookup:
    """Fill missing display names from the name-carrying endpoints."""

    def __init__(self, strategies: list[ProductDiscoveryStrategy]):
        self.strategies = strategies

    @classmethod
    def default(cls, client: FeratelAPIClient) -> "ProductNameLookup":
        return cls([SearchServicesStrategy(client), AccommodationProductsStrategy(client)])

    async def lookup(self, context: OfferContext) -> dict[str, str]:
        """Names for the context's products; stops once every product has one."""
        wanted = {p.product_id for p in context.products if not p.display_name}
        names: dict[str, str] = {}
        for strategy in self.strategies:
            if not wanted - names.keys():
                break
            try:
                found = await strategy.discover(context)
            except FeratelAPIClientError as e:
                logger.warning(
                    "Product name lookup failed",
                    session_id=context.session_id,
                    strategy=strategy.name,
                    error=str(e),
                )
                context.add_trace(f"names/{strategy.name}", status=e.status_code, count=0)
                continue
            context.add_trace(f"names/{strategy.name}", count=len(found))
            for product in found:
                if product.product_id in wanted and product.display_name:
                    names.setdefault(product.product_id, product.display_name)
        return names
