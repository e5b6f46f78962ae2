"""Transformer reducing price matrix rows to per-product totals."""

from datetime import date, timedelta
from typing import Any, Optional

from structlog import get_logger

from src.models.feratel import DayPriceEntry, PriceMatrixRow, is_sentinel_product_id
from src.models.feratel.price_matrix import parse_bucket_date
from src.models.offers import ProductAggregate

logger = get_logger(__name__)


class PriceMatrixTransformer:
    """Parse price matrix responses and aggregate stay prices."""

    @staticmethod
    def parse_rows(data: Any) -> list[PriceMatrixRow]:
        """Validate raw rows, skipping malformed and placeholder ones.

        Args:
            data: Raw price matrix response body

        Returns:
            Rows with a real product id
        """
        if not isinstance(data, list):
            return []

        rows = []
        skipped = 0
        for raw_row in data:
            try:
                row = PriceMatrixRow.model_validate(raw_row)
            except Exception as e:
                logger.warning("Failed to parse price matrix row", error=str(e))
                skipped += 1
                continue
            if is_sentinel_product_id(row.product_id):
                skipped += 1
                continue
            rows.append(row)

        if skipped:
            logger.debug("Skipped price matrix rows", skipped=skipped, kept=len(rows))
        return rows

    @staticmethod
    def is_usable(rows: list[PriceMatrixRow]) -> bool:
        """True when at least one real row carries a non-empty bucket."""
        return any(row.has_buckets() for row in rows)

    @staticmethod
    def select_entries(
        row: PriceMatrixRow,
        nights: int,
        arrival: Optional[date] = None,
    ) -> list[DayPriceEntry]:
        """Entries of the buckets relevant to the requested stay.

        Buckets keyed by a night count contribute only when the key equals
        ``nights``; date-keyed buckets all contribute. With ``arrival`` set,
        entries and bucket dates outside ``[arrival, arrival + nights)`` are
        ignored, since windowed queries return neighbouring dates too.
        """
        night_keyed = {key: entries for key, entries in row.data.items() if key.strip().isdigit()}
        if night_keyed:
            buckets = [entries for key, entries in night_keyed.items() if int(key) == nights]
        else:
            buckets = []
            for key, entries in row.data.items():
                bucket_date = parse_bucket_date(key)
                if arrival and bucket_date and not _within_stay(bucket_date, arrival, nights):
                    continue
                buckets.append(entries)

        selected = []
        for entries in buckets:
            for entry in entries:
                entry_date = entry.stay_date
                if arrival and entry_date and not _within_stay(entry_date, arrival, nights):
                    continue
                selected.append(entry)
        return selected

    @staticmethod
    def aggregate(
        rows: list[PriceMatrixRow],
        nights: int,
        arrival: Optional[date] = None,
    ) -> dict[str, ProductAggregate]:
        """Reduce rows to a total price and priced-night count per product.

        Positive prices are summed and counted; prices of 0 or below add
        nothing. An entry's additional service charges are added only when
        that entry's own price is positive.

        Args:
            rows: Parsed price matrix rows
            nights: Requested night count
            arrival: Arrival date, used to discard out-of-stay entries

        Returns:
            Mapping product id -> aggregate
        """
        aggregates: dict[str, ProductAggregate] = {}

        for row in rows:
            if is_sentinel_product_id(row.product_id):
                continue

            aggregate = aggregates.setdefault(row.product_id, ProductAggregate(nights=nights))
            for entry in PriceMatrixTransformer.select_entries(row, nights, arrival):
                if entry.price <= 0:
                    continue
                aggregate.total_price += entry.price + sum(entry.additional_service_charges)
                aggregate.positive_priced_nights += 1

        for aggregate in aggregates.values():
            aggregate.total_price = round(aggregate.total_price, 2)

        logger.info(
            "Price matrix aggregated",
            products=len(aggregates),
            available=sum(1 for a in aggregates.values() if a.available),
            nights=nights,
        )
        return aggregates


def _within_stay(day: date, arrival: date, nights: int) -> bool:
    return arrival <= day < arrival + timedelta(days=nights)
