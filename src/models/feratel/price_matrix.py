"""Pydantic models for the Feratel price matrix call."""

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from src.models.feratel.search import format_feratel_date

NOT_BOOKABLE_PRICE = -1.0


def _to_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class AdditionalService(BaseModel):
    """Surcharge attached to a day entry (cleaning fee, visitor tax, ...)."""

    price: float = 0.0

    class Config:
        extra = "allow"

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> float:
        return _to_float(v, 0.0)


class DayPriceEntry(BaseModel):
    """Single priced entry inside a day bucket.

    A price of 0 or below (usually -1) marks the night as not bookable.
    """

    date: Optional[str] = None
    price: float = NOT_BOOKABLE_PRICE
    additional_services: list[AdditionalService] = Field(
        default_factory=list, alias="additionalServices"
    )

    class Config:
        extra = "allow"
        populate_by_name = True

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> float:
        return _to_float(v, NOT_BOOKABLE_PRICE)

    @field_validator("additional_services", mode="before")
    @classmethod
    def drop_malformed_services(cls, v: Any) -> list:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]

    @property
    def stay_date(self) -> Optional[dt.date]:
        """Calendar date of the entry, None when absent or unparseable."""
        return parse_bucket_date(self.date)

    @property
    def additional_service_charges(self) -> list[float]:
        """Non-negative surcharge amounts of this entry."""
        return [s.price for s in self.additional_services if s.price >= 0]


class PriceMatrixRow(BaseModel):
    """Per-product price matrix row.

    ``data`` maps a bucket key (nights count such as ``"3"`` or a date string)
    to the entries of that bucket.
    """

    product_id: str = Field(default="", alias="productId")
    data: dict[str, list[DayPriceEntry]] = Field(default_factory=dict)

    class Config:
        extra = "allow"
        populate_by_name = True

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_product_id(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("data", mode="before")
    @classmethod
    def drop_malformed_buckets(cls, v: Any) -> dict:
        if not isinstance(v, dict):
            return {}
        buckets = {}
        for key, entries in v.items():
            if isinstance(entries, list):
                buckets[str(key)] = [e for e in entries if isinstance(e, dict)]
        return buckets

    def has_buckets(self) -> bool:
        """True when at least one bucket holds entries."""
        return any(self.data.values())


def parse_bucket_date(value: Optional[str]) -> Optional[dt.date]:
    """Parse ``2025-06-01`` or ``2025-06-01T00:00:00`` style values."""
    if not value or not isinstance(value, str):
        return None
    try:
        return dt.datetime.fromisoformat(value[:19]).date()
    except ValueError:
        pass
    try:
        return dt.date.fromisoformat(value[:10])
    except ValueError:
        return None


class PriceMatrixRequest(BaseModel):
    """Price matrix query payload."""

    product_ids: list[str]
    from_date: dt.date
    nights: int
    units: int
    adults: int
    children_ages: list[int] = Field(default_factory=list)
    meal_code: str = ""
    currency: str = "EUR"
    arrival_range: int = 0
    nights_range: int = 0

    @staticmethod
    def serialize_children_ages(ages: list[int]) -> str:
        """Comma-joined ages, the only shape the price matrix accepts."""
        return ",".join(str(int(age)) for age in ages if int(age) >= 0)

    def to_feratel_dict(self) -> dict[str, Any]:
        """Convert to the camelCase body the backend expects."""
        return {
            "productIds": list(self.product_ids),
            "fromDate": format_feratel_date(self.from_date),
            "nights": self.nights,
            "units": self.units,
            "adults": self.adults,
            "childrenAges": self.serialize_children_ages(self.children_ages),
            "mealCode": self.meal_code,
            "currency": self.currency,
            "nightsRange": self.nights_range,
            "arrivalRange": self.arrival_range,
        }
