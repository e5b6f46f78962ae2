"""Pipeline context for sharing data between steps."""

from datetime import datetime, timezone
from typing import Any

from src.models.feratel import PriceMatrixRow, ProductRef
from src.models.offers import Offer, ProductAggregate, StayRequest


class OfferContext:
    """Context object for passing data between pipeline steps.

    Created for one incoming request and dropped with its response; nothing
    in it is shared between requests.
    """

    def __init__(self, stay: StayRequest, session_id: str):
        """Initialize pipeline context.

        Args:
            stay: Normalized stay request
            session_id: DW-SessionId correlating every backend call of the request
        """
        self.stay = stay
        self.session_id = session_id
        self.start_time = datetime.now(timezone.utc)

        # Search
        self.search_id: str | None = None

        # Product resolution
        self.products: list[ProductRef] = []
        self.product_source: str | None = None

        # Price matrix
        self.price_rows: list[PriceMatrixRow] = []
        self.aggregates: dict[str, ProductAggregate] = {}

        # Output
        self.offers: list[Offer] = []

        # Per-step trace for the debug output
        self.trace: list[dict[str, Any]] = []

        # Processing statistics
        self.stats: dict[str, Any] = {}

        # Errors encountered during processing
        self.errors: list[dict[str, str]] = []

        self.success: bool = False

    @property
    def nights(self) -> int:
        return self.stay.nights

    @property
    def product_ids(self) -> list[str]:
        return [product.product_id for product in self.products]

    def add_error(self, step_name: str, error_message: str) -> None:
        """Add an error to the context.

        Args:
            step_name: Name of the step where error occurred
            error_message: Error message
        """
        self.errors.append({
            "step": step_name,
            "message": error_message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    def add_trace(self, step_name: str, **info: Any) -> None:
        """Record what a step did (status codes, counts, payloads)."""
        self.trace.append({"step": step_name, **info})

    def has_errors(self) -> bool:
        """Check if any errors were encountered.

        Returns:
            True if errors exist, False otherwise
        """
        return len(self.errors) > 0

    def get_results(self) -> dict[str, Any]:
        """Get the debug dictionary of this run.

        Returns:
            Dictionary with input summary, step trace, errors and statistics
        """
        end_time = datetime.now(timezone.utc)
        duration = (end_time - self.start_time).total_seconds()

        return {
            "session_id": self.session_id,
            "search_id": self.search_id,
            "success": self.success,
            "input": self.stay.summary(),
            "product_source": self.product_source,
            "duration_seconds": duration,
            "steps": self.trace,
            "errors": self.errors,
            "stats": self.stats,
        }
