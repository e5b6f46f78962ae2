"""Step to open a backend search for the stay."""

from src.clients import FeratelAPIClient, FeratelAPIClientError
from src.exceptions import UpstreamError
from src.models.feratel import SearchLine, SearchRequest
from src.services.pipeline import OfferContext, PipelineStep


class OpenSearchStep(PipelineStep):
    """Create the Feratel search that scopes the product lookups."""

    def __init__(self, client: FeratelAPIClient):
        """Initialize the step.

        Args:
            client: Feratel API client bound to the request session
        """
        super().__init__("OpenSearch")
        self.client = client

    async def execute(self, context: OfferContext) -> bool:
        """Submit dates and occupancy lines and keep the search id.

        Args:
            context: Pipeline context

        Returns:
            True when a search id was obtained

        Raises:
            UpstreamError: When the backend returns no usable search id
        """
        search_request = SearchRequest(
            date_from=context.stay.arrival,
            date_to=context.stay.departure,
            lines=[SearchLine.from_occupancy(line) for line in context.stay.occupancy_lines],
        )

        try:
            response = await self.client.create_search(search_request)
        except FeratelAPIClientError as e:
            context.add_trace("search", status=e.status_code, error=str(e))
            raise UpstreamError(
                "search",
                "Failed to initiate search",
                details=e.response_body if e.response_body is not None else str(e),
                request_summary=context.stay.summary(),
            ) from e

        search_id = response.get("id") if isinstance(response, dict) else None
        context.add_trace("search", search_id=search_id)
        if not search_id:
            raise UpstreamError(
                "search",
                "Failed to initiate search",
                details=response,
                request_summary=context.stay.summary(),
            )

        context.search_id = str(search_id)
        self.logger.info(
            "Search opened",
            session_id=context.session_id,
            search_id=context.search_id,
        )
        return True
