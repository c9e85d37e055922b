from shared.clients.documents.DocumentsClientInterface import DocumentsClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import DocumentStats


class StatsService:
    """Keeps the aggregate counts of the whole collection. Failures keep the last known counts."""

    def __init__(self, helper_config: HelperConfig, documents_client: DocumentsClientInterface) -> None:
        self.logging = helper_config.get_logger()
        self._client = documents_client
        self.stats: DocumentStats | None = None
        self.loading = False

    async def fetch_stats(self) -> DocumentStats | None:
        """Refresh the counts. Never raises and never notifies the user.

        Returns:
            DocumentStats | None: The counts now displayed, None if none were ever loaded.
        """
        self.loading = True
        try:
            stats = await self._client.do_fetch_stats()
            if stats is None:
                self.logging.warning("Stats response carried no stats, keeping previous values.")
            else:
                self.stats = stats
        except Exception as e:
            self.logging.error("Failed to fetch stats: %s", e)
        finally:
            self.loading = False
        return self.stats
