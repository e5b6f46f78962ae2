"""Bookable product (room/unit type) references."""

import re

from pydantic import BaseModel, Field

# The backend fills placeholder rows with an all-zero UUID
SENTINEL_PRODUCT_ID = re.compile(r"^0{8}-0{4}-0{4}-0{4}-0{12}$")


def is_sentinel_product_id(product_id: str | None) -> bool:
    """True for empty ids and the all-zero placeholder id."""
    if not product_id:
        return True
    return bool(SENTINEL_PRODUCT_ID.match(str(product_id)))


class ProductRef(BaseModel):
    """Candidate bookable unit resolved for a search."""

    product_id: str = Field(alias="id")
    display_name: str = Field(default="", alias="name")

    class Config:
        populate_by_name = True
