"""Transformer turning loosely shaped client bodies into stay requests.

Occupancy input is clamped rather than rejected; only dates and the unit
count can fail validation.
"""

from datetime import date, datetime
from typing import Any, Optional

from structlog import get_logger

from src.config import settings
from src.exceptions import ValidationError
from src.models.offers import OccupancyLine, PriceMatrixRanges, StayRequest

logger = get_logger(__name__)


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def _to_int(value: Any) -> Optional[int]:
    """Integral value of ints, integral floats and digit strings, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    return None


def _parse_date(value: Any) -> date:
    if not isinstance(value, str):
        raise ValidationError("Invalid date format, expected YYYY-MM-DD")
    text = value.strip()
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError("Invalid date format, expected YYYY-MM-DD") from e


class OccupancyTransformer:
    """Normalize raw offer request bodies."""

    @staticmethod
    def transform(body: Any) -> StayRequest:
        """Validate dates and normalize occupancy of a raw request body.

        Args:
            body: Decoded JSON body of the offers endpoint

        Returns:
            Canonical stay request

        Raises:
            ValidationError: Missing/invalid dates, non-positive night count,
                non-integer unit count
        """
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")

        arrival_raw = body.get("arrival")
        departure_raw = body.get("departure")
        if not arrival_raw or not departure_raw:
            raise ValidationError("Missing arrival or departure date")

        arrival = _parse_date(arrival_raw)
        departure = _parse_date(departure_raw)
        if (departure - arrival).days <= 0:
            raise ValidationError("Departure date must be after arrival date")

        lines = OccupancyTransformer.transform_lines(body)

        return StayRequest(
            arrival=arrival,
            departure=departure,
            occupancy_lines=lines,
            product_ids=OccupancyTransformer._product_ids(body.get("productIds")),
            ranges=OccupancyTransformer._ranges(body.get("ranges")),
            session_id=OccupancyTransformer._session_id(body.get("dwSessionId")),
            debug=body.get("debug") is True,
        )

    @staticmethod
    def transform_lines(body: dict[str, Any]) -> list[OccupancyLine]:
        """Build occupancy lines from the multi-line or the flat shape."""
        raw_lines = body.get("lines")
        if raw_lines is None:
            raw_lines = body.get("occupancies")

        if isinstance(raw_lines, list):
            lines = [
                OccupancyTransformer.transform_line(item)
                for item in raw_lines
                if isinstance(item, dict)
            ]
            if lines:
                return lines
            logger.warning("No usable occupancy lines, using flat occupancy fields")

        return [OccupancyTransformer.transform_line(body)]

    @staticmethod
    def transform_line(raw: dict[str, Any]) -> OccupancyLine:
        """Normalize one occupancy line (or the flat body)."""
        policy = settings.occupancy

        units_raw = raw.get("units", policy.default_units)
        units = _to_int(units_raw)
        if units is None:
            raise ValidationError("Units must be a positive integer")

        adults = _to_int(raw.get("adults", policy.default_adults))
        if adults is None:
            logger.warning("Unparseable adults value, using default", adults=raw.get("adults"))
            adults = policy.default_adults

        ages = raw.get("childrenAges")
        if ages is not None:
            children_ages = OccupancyTransformer.transform_children(ages, ages_only=True)
        else:
            children_ages = OccupancyTransformer.transform_children(raw.get("children"))

        return OccupancyLine(
            units=_clamp(units, 1, policy.max_units),
            adults=_clamp(adults, 0, policy.max_adults),
            children_ages=children_ages,
        )

    @staticmethod
    def transform_children(children: Any, ages_only: bool = False) -> list[int]:
        """Child ages from an age list, a comma string, or a bare count.

        A bare count synthesizes ``default_child_age`` for every child. With
        ``ages_only`` (the ``childrenAges`` field) any string is an age list,
        so ``"8"`` is one child aged 8.
        """
        policy = settings.occupancy

        if isinstance(children, str) and ("," in children or ages_only):
            children = [part for part in children.split(",") if part.strip()]

        if isinstance(children, list):
            ages = []
            for value in children:
                age = _to_int(value)
                if age is None and isinstance(value, float):
                    age = int(value)
                if age is None or age < 0:
                    continue
                ages.append(min(age, policy.max_child_age))
            return ages[: policy.max_children]

        count = _to_int(children)
        if count is None or count <= 0:
            return []
        count = min(count, policy.max_children)
        return [_clamp(policy.default_child_age, 0, policy.max_child_age)] * count

    @staticmethod
    def _product_ids(raw: Any) -> Optional[list[str]]:
        if not isinstance(raw, list):
            return None
        ids = [str(pid).strip() for pid in raw if isinstance(pid, (str, int)) and str(pid).strip()]
        return ids or None

    @staticmethod
    def _ranges(raw: Any) -> Optional[PriceMatrixRanges]:
        if not isinstance(raw, dict):
            return None
        arrival_range = _to_int(raw.get("arrivalRange"))
        if arrival_range is None:
            arrival_range = settings.price_matrix.arrival_range
        nights_range = _to_int(raw.get("nightsRange"))
        if nights_range is None:
            nights_range = settings.price_matrix.nights_range
        return PriceMatrixRanges(
            arrival_range=max(0, arrival_range),
            nights_range=max(0, nights_range),
        )

    @staticmethod
    def _session_id(raw: Any) -> Optional[str]:
        if isinstance(raw, str) and raw.strip():
            return raw.strip()
        return None
