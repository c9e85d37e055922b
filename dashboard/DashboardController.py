"""Dashboard orchestrator.

Wires the query engine, statistics, upload batch, reconciler and notifications
around one session, and keeps the small pieces of screen state (expanded rows).
"""

from typing import Callable

from dashboard.presentation.derivation import DocumentRow, build_row
from dashboard.presentation.formatters import DEFAULT_DATE_FORMAT
from dashboard.services.CollectionQueryService import CollectionQueryService
from dashboard.services.MutationReconciler import ConfirmCallback, MutationReconciler
from dashboard.services.NotificationService import NotificationService
from dashboard.services.StatsService import StatsService
from dashboard.services.UploadBatchBuilder import UploadBatchBuilder
from shared.clients.documents.DocumentsClientInterface import DocumentsClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.upload import SingleUpload

LOADING_MESSAGE = "Loading documents..."
EMPTY_MESSAGE = "No documents yet."


class DashboardController:
    def __init__(
        self,
        helper_config: HelperConfig,
        documents_client: DocumentsClientInterface,
        on_unauthenticated: Callable[[], None] | None = None,
        confirm: ConfirmCallback | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._client = documents_client
        self._session = documents_client.get_session()
        self._on_unauthenticated = on_unauthenticated
        self._date_format = helper_config.get_string_val("DASHBOARD_DATE_FORMAT", default=DEFAULT_DATE_FORMAT)
        self._tz_name = helper_config.get_string_val("TIMEZONE", default="Europe/Berlin")

        self.notifications = NotificationService(helper_config)
        self.query = CollectionQueryService(helper_config, documents_client, self.notifications)
        self.stats = StatsService(helper_config, documents_client)
        self.uploads = UploadBatchBuilder(helper_config)
        self.mutations = MutationReconciler(
            helper_config,
            documents_client,
            query_service=self.query,
            stats_service=self.stats,
            batch_builder=self.uploads,
            notifications=self.notifications,
            confirm=confirm,
        )
        self.expanded_rows: dict[str, bool] = {}

    ##########################################
    ############### LIFECYCLE ################
    ##########################################

    async def activate(self) -> bool:
        """Load the first page and the statistics. Without a credential, hand over to the login flow."""
        if not self._session.is_authenticated:
            self.logging.info("No session credential, redirecting to login.")
            self._signal_unauthenticated()
            return False
        await self.query.search(page=1)
        await self.stats.fetch_stats()
        self.logging.info("Dashboard ready: %d of %d documents on page %d.", len(self.query.documents), self.query.state.total, self.query.state.page)
        return True

    def logout(self) -> None:
        self._session.clear()
        self.expanded_rows = {}
        self.mutations.cancel_edit()
        self._signal_unauthenticated()

    def _signal_unauthenticated(self) -> None:
        if self._on_unauthenticated is not None:
            self._on_unauthenticated()

    ##########################################
    ############### SCREEN STATE #############
    ##########################################

    def toggle_row(self, document_id: str) -> bool:
        self.expanded_rows[document_id] = not self.expanded_rows.get(document_id, False)
        return self.expanded_rows[document_id]

    def is_expanded(self, document_id: str) -> bool:
        return self.expanded_rows.get(document_id, False)

    def rows(self) -> list[DocumentRow]:
        return [
            build_row(doc, expanded=self.is_expanded(doc.id), date_format=self._date_format, tz_name=self._tz_name)
            for doc in self.query.documents
        ]

    def empty_message(self) -> str | None:
        """Placeholder text for an empty table, None when there are rows."""
        if self.query.documents:
            return None
        return LOADING_MESSAGE if self.query.loading else EMPTY_MESSAGE

    ##########################################
    ################ ACTIONS #################
    ##########################################

    async def submit_upload(self, single: SingleUpload | None = None) -> bool:
        """Upload the staged batch, or the single-file form when no batch was built."""
        if len(self.uploads) > 0:
            return await self.mutations.create_batch()
        return await self.mutations.create_single(single or SingleUpload())
