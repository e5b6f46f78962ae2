"""Offer models returned to API callers."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ProductAggregate(BaseModel):
    """Reduced price matrix result for one product."""

    total_price: float = 0.0
    positive_priced_nights: int = 0
    nights: int = 0

    @property
    def available(self) -> bool:
        """Bookable only with a positive total and every night priced."""
        return self.total_price > 0 and self.positive_priced_nights >= self.nights


class Offer(BaseModel):
    """Room offer for the requested stay."""

    product_id: str = Field(alias="productId")
    name: str = ""
    total_price: float = Field(default=0.0, ge=0, alias="totalPrice")
    currency: str = "EUR"
    availability: bool = False
    nights: int

    class Config:
        populate_by_name = True


class OffersResponse(BaseModel):
    """Response body of the offers endpoint."""

    offers: list[Offer] = Field(default_factory=list)
    debug: Optional[dict[str, Any]] = None

    def to_response_dict(self) -> dict[str, Any]:
        """Serialize with camelCase offer keys, omitting empty debug."""
        body: dict[str, Any] = {
            "offers": [offer.model_dump(by_alias=True) for offer in self.offers],
        }
        if self.debug is not None:
            body["debug"] = self.debug
        return body
