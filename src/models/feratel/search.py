"""Pydantic models for the Feratel search-creation call."""

from datetime import date

from pydantic import BaseModel, Field

from src.models.offers.stay import OccupancyLine


def format_feratel_date(value: date) -> str:
    """Render a date the way the Deskline API expects it."""
    return f"{value.isoformat()}T00:00:00.000"


class SearchLine(BaseModel):
    """One occupancy line of a search, not expanded per unit."""

    units: int
    adults: int
    children: int = 0
    # Search creation takes the ages as a list of integers
    children_ages: list[int] = Field(default_factory=list, alias="childrenAges")

    class Config:
        populate_by_name = True

    @classmethod
    def from_occupancy(cls, line: OccupancyLine) -> "SearchLine":
        """Serialize an occupancy line for search creation."""
        ages = [int(age) for age in line.children_ages]
        return cls(
            units=line.units,
            adults=line.adults,
            children=len(ages),
            children_ages=ages,
        )


class SearchRequest(BaseModel):
    """Search-creation payload."""

    date_from: date
    date_to: date
    lines: list[SearchLine] = Field(default_factory=list)

    def to_feratel_dict(self) -> dict:
        """Convert to the nested searchObject body the backend expects."""
        return {
            "searchObject": {
                "searchGeneral": {
                    "dateFrom": format_feratel_date(self.date_from),
                    "dateTo": format_feratel_date(self.date_to),
                },
                "searchAccommodation": {
                    "searchLines": [
                        line.model_dump(by_alias=True) for line in self.lines
                    ],
                },
            },
        }
