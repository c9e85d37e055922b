from shared.clients.documents.DocumentsClientInterface import DocumentsClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.document import DocumentRecord, DocumentStats, DocumentsListResponse, DocumentType, SectionExpiry, DEFAULT_REMINDER_DAYS
from shared.models.session import SessionContext
from datetime import datetime


class DocumentsClientRest(DocumentsClientInterface):
    def __init__(self, helper_config: HelperConfig, session: SessionContext | None = None):
        super().__init__(helper_config=helper_config, session=session)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Rest"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._session.is_authenticated:
            return {"Authorization": f"Bearer {self._session.token}"}
        else:
            return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_search(self) -> str:
        return "/documents/search"

    def _get_endpoint_documents(self) -> str:
        return "/documents"

    def _get_endpoint_stats(self) -> str:
        return "/documents/stats"

    def _get_endpoint_document_details(self, document_id: str) -> str:
        return f"/documents/{document_id}"

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    ############### LIST RESPONSES ###############
    def _parse_endpoint_documents(self, response: dict) -> DocumentsListResponse:
        raw_documents = response.get("documents")
        if not isinstance(raw_documents, list):
            return DocumentsListResponse(documents=None, total=None, page=None)

        docs = []
        for item in raw_documents:
            try:
                docs.append(self._parse_endpoint_document(item))
            except (ValueError, TypeError, AttributeError) as e:
                self.logging.warning("Skipping unparseable document in listing: %s", e)

        return DocumentsListResponse(
            documents=docs,
            total=self._parse_int(response.get("total")),
            page=self._parse_int(response.get("page")),
        )

    ############### GET RESPONSES ###############
    def _parse_endpoint_document(self, response: dict) -> DocumentRecord:
        # the API is Mongo-backed and sends "_id"
        document_id = response.get("_id") or response.get("id")
        if not document_id:
            raise ValueError(f"Document without id: {response!r}")
        reminder_days = self._parse_int(response.get("reminderDays"))
        return DocumentRecord(
                #base
                id=str(document_id),
                title=response.get("title") or "",

                #client-editable
                description=response.get("description") or "",
                document_type=self._parse_document_type(response.get("documentType")),
                reminder_days=reminder_days if reminder_days is not None and reminder_days >= 0 else DEFAULT_REMINDER_DAYS,

                #server-derived
                expiry_date=self._parse_datetime(response.get("expiryDate")),
                section_expiries=[
                    SectionExpiry(
                        header=section.get("header") or None,
                        expiry_date=self._parse_datetime(section.get("expiryDate")),
                        raw_expiry=section.get("rawExpiry") or None,
                    )
                    for section in (response.get("sectionExpiries") or [])
                    if isinstance(section, dict)
                ],
                status=response.get("status") or None,
                extracted_text=response.get("extractedText") or None,
            )

    def _parse_endpoint_stats(self, response: dict) -> DocumentStats | None:
        stats = response.get("stats")
        if not isinstance(stats, dict):
            return None
        return DocumentStats(
            total=self._parse_int(stats.get("total")) or 0,
            active=self._parse_int(stats.get("active")) or 0,
            expiring_soon=self._parse_int(stats.get("expiring_soon")) or 0,
            expired=self._parse_int(stats.get("expired")) or 0,
        )

    ############### HELPERS ###############
    def _parse_document_type(self, value) -> DocumentType:
        try:
            return DocumentType(value)
        except ValueError:
            if value:
                self.logging.debug("Unknown document type %r, treating as 'other'.", value)
            return DocumentType.OTHER

    def _parse_datetime(self, value) -> datetime | None:
        if not value:
            return None
        if isinstance(value, datetime):
            return value
        try:
            return datetime.fromisoformat(str(value))
        except ValueError:
            self.logging.debug("Unparseable date %r, ignoring.", value)
            return None

    def _parse_int(self, value) -> int | None:
        if value is None or value == "":
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
