"""Feratel Deskline web API client for searches, products and price matrices."""

from typing import Any, Optional

import httpx
from structlog import get_logger

from src.config import settings
from src.models.feratel import PriceMatrixRequest, SearchRequest

logger = get_logger(__name__)


class FeratelAPIClientError(Exception):
    """Base exception for Feratel API client errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class FeratelAPIAuthenticationError(FeratelAPIClientError):
    """Raised when the backend rejects the session or source headers."""

    pass


class FeratelAPINotFoundError(FeratelAPIClientError):
    """Raised when a Feratel resource is not found."""

    pass


class FeratelAPIServerError(FeratelAPIClientError):
    """Raised when the Feratel API returns a server error."""

    pass


def _response_body(response: httpx.Response) -> Any:
    """Parsed JSON body, falling back to the raw text."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class FeratelAPIClient:
    """Client for the Feratel Deskline endpoints used by the offer pipeline.

    One instance serves one incoming request: every call carries the same
    ``DW-SessionId`` and reuses one pooled ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        session_id: str,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the client for one request.

        Args:
            session_id: DW-SessionId sent with every call
            http_client: Optional pre-built client (tests inject a mock transport)
        """
        self.session_id = session_id
        self.api_base_url = settings.feratel.api_base_url.rstrip("/")
        self.accommodation_url = settings.feratel_accommodation_url
        self.currency = settings.feratel.currency
        self.page_size = settings.feratel.page_size
        self.timeout = settings.feratel.request_timeout
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "FeratelAPIClient":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_headers(self) -> dict[str, str]:
        """Get default headers for Feratel API requests.

        Returns:
            Dictionary of HTTP headers including session and source ids.
        """
        return {
            "Content-Type": "application/json",
            "Accept": "application/json, text/plain, */*",
            "Accept-Language": settings.feratel.accept_language,
            "User-Agent": settings.feratel.user_agent,
            "Origin": settings.feratel.origin,
            "Referer": settings.feratel.referer,
            "DW-Source": settings.feratel_dw_source(),
            "DW-SessionId": self.session_id,
        }

    async def _make_request(
        self,
        method: str,
        url: str,
        data: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Make a single HTTP request to the Feratel API.

        No retries: a failed call fails its pipeline stage.

        Args:
            method: HTTP method (GET, POST)
            url: Absolute endpoint URL
            data: Request body data (for POST requests)
            params: Query parameters

        Returns:
            Decoded JSON response (list, dict, or None for empty bodies)

        Raises:
            FeratelAPIAuthenticationError: On 401/403
            FeratelAPINotFoundError: On 404
            FeratelAPIServerError: On 5xx
            FeratelAPIClientError: For timeouts, transport and other errors
        """
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True

        try:
            response = await self._client.request(
                method=method,
                url=url,
                headers=self._get_headers(),
                json=data,
                params=params,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            logger.error(
                "Feratel API request timeout",
                session_id=self.session_id,
                url=url,
                timeout=self.timeout,
            )
            raise FeratelAPIClientError(f"Request timeout for {url}") from e
        except httpx.RequestError as e:
            logger.error(
                "Feratel API request error",
                session_id=self.session_id,
                url=url,
                error=str(e),
            )
            raise FeratelAPIClientError(f"Request failed for {url}: {str(e)}") from e

        body = _response_body(response)

        if response.status_code in (401, 403):
            logger.error(
                "Feratel API rejected session",
                session_id=self.session_id,
                url=url,
                status_code=response.status_code,
            )
            raise FeratelAPIAuthenticationError(
                f"Access denied for {url}: check DW-Source and DW-SessionId",
                status_code=response.status_code,
                response_body=body,
            )

        if response.status_code == 404:
            logger.warning(
                "Feratel API resource not found",
                session_id=self.session_id,
                url=url,
                status_code=response.status_code,
            )
            raise FeratelAPINotFoundError(
                f"Resource not found: {url}",
                status_code=response.status_code,
                response_body=body,
            )

        if response.status_code >= 500:
            logger.error(
                "Feratel API server error",
                session_id=self.session_id,
                url=url,
                status_code=response.status_code,
            )
            raise FeratelAPIServerError(
                f"Server error at {url}: {response.status_code}",
                status_code=response.status_code,
                response_body=body,
            )

        if not response.is_success:
            logger.error(
                "Feratel API client error",
                session_id=self.session_id,
                url=url,
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            raise FeratelAPIClientError(
                f"Client error at {url}: {response.status_code}",
                status_code=response.status_code,
                response_body=body,
            )

        logger.debug(
            "Feratel API request successful",
            session_id=self.session_id,
            url=url,
            method=method,
            status_code=response.status_code,
        )
        return body

    async def create_search(self, search_request: SearchRequest) -> Any:
        """Open a backend search for a date range and occupancy.

        Args:
            search_request: Search payload (dates and occupancy lines)

        Returns:
            Raw response body; carries the search id under ``id``
        """
        logger.info(
            "Creating Feratel search",
            session_id=self.session_id,
            date_from=search_request.date_from.isoformat(),
            date_to=search_request.date_to.isoformat(),
            lines=len(search_request.lines),
        )
        return await self._make_request(
            "POST", f"{self.api_base_url}/searches", data=search_request.to_feratel_dict()
        )

    async def get_search_services(self, search_id: str) -> Any:
        """List the services (rooms) of the accommodation for a search."""
        params = {
            "fields": "id,name",
            "currency": self.currency,
            "searchId": search_id,
            "pageNo": 1,
            "pageSize": self.page_size,
        }
        return await self._make_request(
            "GET", f"{self.accommodation_url}/services", params=params
        )

    async def get_packages(self, search_id: str) -> Any:
        """List the packages of the accommodation with their nested products."""
        params = {
            "fields": "id,name,products{id,name}",
            "currency": self.currency,
            "searchId": search_id,
            "pageNo": 1,
            "pageSize": self.page_size,
        }
        return await self._make_request(
            "GET", f"{self.accommodation_url}/packages", params=params
        )

    async def get_accommodation_products(self) -> Any:
        """Fetch the accommodation detail with its embedded products."""
        params = {
            "fields": "products{id,name}",
            "currency": self.currency,
            "pageNo": 1,
            "pageSize": self.page_size,
        }
        return await self._make_request("GET", self.accommodation_url, params=params)

    async def get_price_matrix(self, request: PriceMatrixRequest) -> Any:
        """Query per-product pricing for a stay.

        Args:
            request: Price matrix payload

        Returns:
            Raw response body, normally a list of product rows
        """
        logger.info(
            "Fetching Feratel price matrix",
            session_id=self.session_id,
            products=len(request.product_ids),
            nights=request.nights,
            arrival_range=request.arrival_range,
            nights_range=request.nights_range,
        )
        return await self._make_request(
            "POST", f"{self.accommodation_url}/pricematrix", data=request.to_feratel_dict()
        )
