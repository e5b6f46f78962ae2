"""Error taxonomy of the offer pipeline.

Each error knows the HTTP status it maps to; the API layer turns it into a
JSON body without exposing tracebacks.
"""

from typing import Any, Optional


class OfferError(Exception):
    """Base exception for offer pipeline failures."""

    status_code = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(OfferError):
    """Malformed or missing caller input. Raised before any backend call."""

    status_code = 400


class NotFoundError(OfferError):
    """No bookable product could be resolved for the search."""

    status_code = 404


class UpstreamError(OfferError):
    """The booking backend failed at a stage the pipeline cannot skip."""

    status_code = 502

    def __init__(
        self,
        stage: str,
        message: str,
        details: Any = None,
        request_summary: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)
        self.stage = stage
        self.request_summary = request_summary or {}

    def to_dict(self) -> dict[str, Any]:
        # details is always present for upstream failures, even when empty
        return {"error": self.message, "stage": self.stage, "details": self.details}
