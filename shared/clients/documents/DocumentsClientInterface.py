from abc import abstractmethod
from shared.helper.HelperConfig import HelperConfig
from shared.clients.ClientInterface import ClientInterface
from shared.models.document import DocumentRecord, DocumentStats, DocumentsListResponse, MutationResult
from shared.models.session import SessionContext


class DocumentsClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig, session: SessionContext | None = None):
        super().__init__(helper_config=helper_config, session=session)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "documents"
        """
        return "documents"

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_search(self) -> str:
        """
        Returns the endpoint path for filtered, paginated document search.

        Returns:
            str: The endpoint path (e.g. "/documents/search")
        """
        pass

    @abstractmethod
    def _get_endpoint_documents(self) -> str:
        """
        Returns the endpoint path for the unfiltered listing, also used for uploads.

        Returns:
            str: The endpoint path (e.g. "/documents")
        """
        pass

    @abstractmethod
    def _get_endpoint_stats(self) -> str:
        """
        Returns the endpoint path for the aggregate statistics.

        Returns:
            str: The endpoint path (e.g. "/documents/stats")
        """
        pass

    @abstractmethod
    def _get_endpoint_document_details(self, document_id: str) -> str:
        """
        Returns the endpoint path for a single document, used for updates and deletes.

        Args:
            document_id (str): The ID of the document.

        Returns:
            str: The endpoint path (e.g. "/documents/{id}")
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    ############# LISTING REQUESTS ##############
    async def do_search_documents(self, params: dict) -> DocumentsListResponse:
        """
        Runs a filtered, paginated search.

        Args:
            params (dict): Query parameters, already stripped of empty filters.

        Returns:
            DocumentsListResponse: The parsed page. documents is None if the reply lacked the field.

        Raises:
            ClientRequestError: On non-2xx responses.
            httpx.HTTPError: On transport failures.
        """
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_search(), params=params)
        result = self._parse_endpoint_documents(self._json_or_empty(resp))
        self.logging.debug("Search %s returned %s documents (total=%s).", params, len(result.documents) if result.documents is not None else "no", result.total)
        return result

    async def do_fetch_documents(self) -> DocumentsListResponse:
        """
        Fetches the unfiltered document listing.

        Returns:
            DocumentsListResponse: The parsed listing.
        """
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_documents())
        return self._parse_endpoint_documents(self._json_or_empty(resp))

    async def do_fetch_stats(self) -> DocumentStats | None:
        """
        Fetches the aggregate statistics of the whole collection.

        Returns:
            DocumentStats | None: The counts, or None if the reply carried no stats.
        """
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_stats())
        return self._parse_endpoint_stats(self._json_or_empty(resp))

    ############# MUTATING REQUESTS ##############
    async def do_create_documents(self, data: dict, files: list | dict) -> MutationResult:
        """
        Uploads one or more files with their metadata as a multipart request.

        Args:
            data (dict): The form fields.
            files (list | dict): The file parts in httpx format.

        Returns:
            MutationResult: The created records, or Empty if the server returned none.
        """
        resp = await self.do_request(method="POST", endpoint=self._get_endpoint_documents(), data=data, files=files)
        return self.normalize_mutation_response(self._json_or_empty(resp))

    async def do_update_document(self, document_id: str, payload: dict) -> MutationResult:
        """
        Updates the client-editable fields of one document.

        Args:
            document_id (str): The ID of the document to update.
            payload (dict): The JSON body.

        Returns:
            MutationResult: The canonical record, or Empty if the server omitted it.
        """
        resp = await self.do_request(method="PUT", endpoint=self._get_endpoint_document_details(document_id), json=payload)
        return self.normalize_mutation_response(self._json_or_empty(resp))

    async def do_delete_document(self, document_id: str) -> None:
        """
        Deletes one document. Success is signalled by not raising.

        Args:
            document_id (str): The ID of the document to delete.
        """
        await self.do_request(method="DELETE", endpoint=self._get_endpoint_document_details(document_id))

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def normalize_mutation_response(self, response: dict) -> MutationResult:
        """
        Normalizes the reply of a create or update call into a single tagged shape.

        Accepts {"documents": [...]}, {"document": [...]} and {"document": {...}}.
        Anything else, including entries that cannot be parsed, counts as Empty.

        Args:
            response (dict): The decoded JSON body.

        Returns:
            MutationResult: Records in server order, or Empty.
        """
        raw_documents = response.get("documents")
        if not isinstance(raw_documents, list):
            raw_documents = response.get("document")
        if isinstance(raw_documents, dict):
            raw_documents = [raw_documents]
        if not isinstance(raw_documents, list):
            return MutationResult.empty()

        documents = []
        for item in raw_documents:
            try:
                documents.append(self._parse_endpoint_document(item))
            except (ValueError, TypeError, AttributeError) as e:
                self.logging.warning("Skipping unparseable document in mutation response: %s", e)
        return MutationResult.records(documents)

    @abstractmethod
    def _parse_endpoint_documents(self, response: dict) -> DocumentsListResponse:
        """
        Parses a listing or search reply.

        Args:
            response (dict): The raw reply.

        Returns:
            DocumentsListResponse: documents is None if the reply lacked the field.
        """
        pass

    @abstractmethod
    def _parse_endpoint_document(self, response: dict) -> DocumentRecord:
        """
        Parses a raw document dict from the backend API into a DocumentRecord.

        Args:
            response (dict): The raw document data as returned by the backend API.

        Returns:
            DocumentRecord: The parsed document object.

        Raises:
            ValueError: If required fields are missing or the data format is invalid.
        """
        pass

    @abstractmethod
    def _parse_endpoint_stats(self, response: dict) -> DocumentStats | None:
        """
        Parses the statistics reply.

        Args:
            response (dict): The raw reply.

        Returns:
            DocumentStats | None: None if the reply carried no stats object.
        """
        pass
