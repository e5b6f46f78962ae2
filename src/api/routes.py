"""Offer endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, Request
from structlog import get_logger

from src.config import settings
from src.exceptions import ValidationError
from src.services import OfferService

logger = get_logger(__name__)

router = APIRouter()

OFFER_ROUTES = ("/offers", "/get-price")


def get_offer_service() -> OfferService:
    """Offer service dependency, one per request."""
    return OfferService()


async def _read_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise ValidationError("Request body must be valid JSON") from e


@router.post("/offers")
@router.post("/get-price")
async def get_offers(
    request: Request,
    service: OfferService = Depends(get_offer_service),
) -> dict[str, Any]:
    """Price every resolved room for the requested stay."""
    body = await _read_body(request)
    response = await service.get_offers(body)
    return response.to_response_dict()


@router.get("/")
async def index() -> dict[str, Any]:
    return {
        "ok": True,
        "routes": [f"POST {route}" for route in OFFER_ROUTES],
        "accommodationId": settings.feratel_accommodation_id(),
        "destination": settings.feratel.destination,
        "prefix": settings.feratel.prefix,
    }


@router.get("/health")
async def health() -> dict[str, Any]:
    return {"ok": True, "environment": settings.environment}
