"""Shared decoder for the Feratel API's polymorphic list responses.

Listing endpoints answer with a bare array, with an object wrapping the
array under some field, or with a single object carrying nested products.
Every caller goes through here instead of probing shapes on its own.
"""

from typing import Any, Iterable, Iterator

from structlog import get_logger

from src.models.feratel import ProductRef, is_sentinel_product_id

logger = get_logger(__name__)

# Field names checked first when an object wraps the item list
ITEM_FIELD_PRIORITY = ("items", "data", "results", "services", "packages", "products")


class ResponseDecoder:
    """Unwrap list-shaped payloads and extract product references."""

    @staticmethod
    def pluck_items(
        data: Any,
        priority: Iterable[str] = ITEM_FIELD_PRIORITY,
    ) -> list[Any]:
        """Return the item list carried by a response body.

        A top-level array is returned as is. For an object, the first
        array-valued field in ``priority`` wins, then the first array-valued
        field in document order. Anything else yields an empty list.
        """
        if isinstance(data, list):
            return data
        if not isinstance(data, dict):
            return []
        for key in priority:
            if isinstance(data.get(key), list):
                return data[key]
        for value in data.values():
            if isinstance(value, list):
                return value
        return []

    @staticmethod
    def iter_nested_products(data: Any) -> Iterator[Any]:
        """Yield the items of every nested ``products`` list.

        Accepts a single block (``{"products": [...]}``) or a list of blocks.
        """
        if isinstance(data, dict) and isinstance(data.get("products"), list):
            blocks = [data]
        else:
            blocks = ResponseDecoder.pluck_items(data, priority=("items", "data", "packages"))
        for block in blocks:
            if isinstance(block, dict) and isinstance(block.get("products"), list):
                yield from block["products"]

    @staticmethod
    def to_product_refs(items: Iterable[Any]) -> list[ProductRef]:
        """Convert raw ``{id, name}`` items into de-duplicated product refs.

        Sentinel ids are dropped; the first occurrence of an id wins.
        """
        refs: list[ProductRef] = []
        seen: set[str] = set()
        dropped = 0
        for item in items:
            if not isinstance(item, dict):
                continue
            product_id = item.get("id")
            if is_sentinel_product_id(product_id):
                dropped += 1
                continue
            product_id = str(product_id)
            if product_id in seen:
                continue
            seen.add(product_id)
            name = item.get("name")
            refs.append(
                ProductRef(product_id=product_id, display_name=name if isinstance(name, str) else "")
            )
        if dropped:
            logger.debug("Dropped placeholder product ids", count=dropped)
        return refs

    @staticmethod
    def ids_to_product_refs(product_ids: Iterable[Any]) -> list[ProductRef]:
        """Build nameless refs from a plain id list."""
        return ResponseDecoder.to_product_refs({"id": pid} for pid in product_ids)
