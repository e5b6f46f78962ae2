"""Normalized stay request models."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class OccupancyLine(BaseModel):
    """One group of identical units within a stay request.

    ``adults`` and ``children_ages`` describe a single unit.
    """

    units: int = Field(default=1, ge=1)
    adults: int = Field(default=2, ge=0)
    children_ages: list[int] = Field(default_factory=list)


class OccupancyTotals(BaseModel):
    """Aggregate occupancy across all lines and unit instances."""

    total_units: int
    total_adults: int
    all_child_ages: list[int] = Field(default_factory=list)


class PriceMatrixRanges(BaseModel):
    """Date/night slack granted to the backend in a price matrix query."""

    arrival_range: int = Field(default=1, ge=0, alias="arrivalRange")
    nights_range: int = Field(default=1, ge=0, alias="nightsRange")

    class Config:
        populate_by_name = True


class StayRequest(BaseModel):
    """Canonical stay request handed to the offer pipeline."""

    arrival: date
    departure: date
    occupancy_lines: list[OccupancyLine] = Field(min_length=1)
    product_ids: Optional[list[str]] = None
    ranges: Optional[PriceMatrixRanges] = None
    session_id: Optional[str] = None
    debug: bool = False

    @property
    def nights(self) -> int:
        """Number of nights between arrival and departure."""
        return (self.departure - self.arrival).days

    @property
    def totals(self) -> OccupancyTotals:
        """Totals across lines; adults count per unit, so they scale with units."""
        child_ages: list[int] = []
        for line in self.occupancy_lines:
            for _ in range(line.units):
                child_ages.extend(line.children_ages)
        return OccupancyTotals(
            total_units=sum(line.units for line in self.occupancy_lines),
            total_adults=sum(line.adults * line.units for line in self.occupancy_lines),
            all_child_ages=child_ages,
        )

    def summary(self) -> dict:
        """Short description used in logs and debug output."""
        totals = self.totals
        return {
            "arrival": self.arrival.isoformat(),
            "departure": self.departure.isoformat(),
            "nights": self.nights,
            "lines": len(self.occupancy_lines),
            "units": totals.total_units,
            "adults": totals.total_adults,
            "children_ages": totals.all_child_ages,
        }
