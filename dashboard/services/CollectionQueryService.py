"""Collection query engine.

Owns the filter values, the current page and the cached document list. Every
search fully replaces the list and the total with what the server answered.
Search failures degrade to one unfiltered listing call, and then to an empty list.
"""

import math

from dashboard.services.NotificationService import NotificationService
from shared.clients.documents.DocumentsClientInterface import DocumentsClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import DocumentRecord, DocumentsListResponse
from shared.models.search import DEFAULT_PAGE_SIZE, QueryState, SearchResult

SEARCH_FAILED_MESSAGE = "Failed to fetch documents."


def build_search_params(state: QueryState) -> dict[str, str | int]:
    """Translate the query state into request parameters. Empty filters are never sent."""
    params: dict[str, str | int] = {}
    query = state.query.strip()
    if query:
        params["query"] = query
    document_type = state.document_type.strip()
    if document_type:
        params["type"] = document_type
    status = state.status.strip()
    if status:
        params["status"] = status
    params["page"] = state.page
    params["limit"] = state.limit
    return params


class CollectionQueryService:
    def __init__(
        self,
        helper_config: HelperConfig,
        documents_client: DocumentsClientInterface,
        notifications: NotificationService,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._client = documents_client
        self._notifications = notifications
        self._discard_stale = helper_config.get_bool_val("DASHBOARD_DISCARD_STALE_SEARCH", default=False)

        page_size = helper_config.get_int_val("DASHBOARD_PAGE_SIZE", default=DEFAULT_PAGE_SIZE, minimum=1)
        self.state = QueryState(limit=page_size)
        self.documents: list[DocumentRecord] = []
        self._issued_requests = 0
        self._in_flight = 0

    ##########################################
    ################ GETTER ##################
    ##########################################

    @property
    def loading(self) -> bool:
        """True while any search call is still waiting for the server."""
        return self._in_flight > 0

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.state.total / self.state.limit))

    def current_result(self) -> SearchResult:
        return SearchResult(documents=list(self.documents), total=self.state.total, page=self.state.page)

    def find_document(self, document_id: str) -> DocumentRecord | None:
        return next((doc for doc in self.documents if doc.id == document_id), None)

    ##########################################
    ############### SEARCH ###################
    ##########################################

    async def search(
        self,
        query: str | None = None,
        document_type: str | None = None,
        status: str | None = None,
        page: int | None = None,
    ) -> SearchResult:
        """Fetch one page for the given filters. Arguments left as None keep their current value.

        Args:
            query (str | None): Free-text filter, trimmed before sending.
            document_type (str | None): Document type filter, "" for all.
            status (str | None): Status filter, "" for all.
            page (int | None): Page to fetch, positive.

        Returns:
            SearchResult: The list, total and page now held by the service.
        """
        if query is not None:
            self.state.query = query
        if document_type is not None:
            self.state.document_type = document_type
        if status is not None:
            self.state.status = status
        if page is not None:
            self.state.page = max(1, page)
        requested_page = self.state.page

        params = build_search_params(self.state)
        self._issued_requests += 1
        request_token = self._issued_requests

        self._in_flight += 1
        try:
            response = await self._client.do_search_documents(params)
            if self._is_stale(request_token):
                self.logging.debug("Discarding stale search response #%d.", request_token)
                return self.current_result()
            self._apply_search_response(response, requested_page)
        except Exception as e:
            if self._is_stale(request_token):
                self.logging.debug("Ignoring failure of stale search #%d: %s", request_token, e)
                return self.current_result()
            self.logging.error("Error fetching documents with %s: %s", params, e)
            self._notifications.warning(SEARCH_FAILED_MESSAGE)
            await self._fetch_fallback(request_token)
        finally:
            self._in_flight -= 1

        return self.current_result()

    async def submit_search(
        self,
        query: str | None = None,
        document_type: str | None = None,
        status: str | None = None,
    ) -> SearchResult:
        """Run the (possibly updated) filters from the first page."""
        return await self.search(query=query, document_type=document_type, status=status, page=1)

    async def clear_filters(self) -> SearchResult:
        return await self.search(query="", document_type="", status="", page=1)

    async def go_to_page(self, page: int) -> SearchResult:
        return await self.search(page=page)

    async def refresh(self) -> SearchResult:
        """Re-fetch the current page with the current filters."""
        return await self.search(page=self.state.page)

    def _is_stale(self, request_token: int) -> bool:
        return self._discard_stale and request_token != self._issued_requests

    def _apply_search_response(self, response: DocumentsListResponse, requested_page: int) -> None:
        if response.documents is None:
            self.logging.warning("Search response carried no documents, showing an empty list.")
            self.documents = []
            self.state.total = 0
            return
        self.documents = list(response.documents)
        self.state.total = max(0, response.total or 0)
        self.state.page = response.page if response.page and response.page >= 1 else requested_page

    async def _fetch_fallback(self, request_token: int) -> None:
        """One unfiltered listing call. No further retry."""
        response: DocumentsListResponse | None = None
        try:
            response = await self._client.do_fetch_documents()
        except Exception as e:
            self.logging.error("Fallback document listing failed: %s", e)

        if self._is_stale(request_token):
            return
        if response is not None and response.documents is not None:
            self.logging.info("Showing %d documents from the unfiltered listing.", len(response.documents))
            self.documents = list(response.documents)
            self.state.total = len(self.documents)
            self.state.page = 1
        else:
            self.documents = []
            self.state.total = 0

    ##########################################
    ############ LIST CACHE ##################
    ##########################################

    def prepend_documents(self, documents: list[DocumentRecord]) -> None:
        self.documents = list(documents) + self.documents

    def replace_document(self, document: DocumentRecord) -> bool:
        """Replace the cached record with the same id in place. Returns False if it is not cached."""
        for index, cached in enumerate(self.documents):
            if cached.id == document.id:
                self.documents = self.documents[:index] + [document] + self.documents[index + 1:]
                return True
        return False

    def remove_document(self, document_id: str) -> None:
        self.documents = [doc for doc in self.documents if doc.id != document_id]
