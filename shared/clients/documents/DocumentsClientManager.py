from shared.helper.HelperConfig import HelperConfig
from shared.clients.documents.DocumentsClientInterface import DocumentsClientInterface
from shared.models.session import SessionContext


class DocumentsClientManager:
    """
    Manager class to instantiate the documents client selected by configuration.
    """

    def __init__(self, helper_config: HelperConfig, session: SessionContext | None = None):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.session = session
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """
        Reads the documents engine from ENV configuration.

        Returns:
            str: The engine name, capitalized (e.g. "Rest").
        """
        engine = self.helper_config.get_string_val("DOCUMENTS_ENGINE", default="rest")
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> DocumentsClientInterface:
        """
        Initializes the documents client for the configured engine.

        Returns:
            DocumentsClientInterface: The client instance.

        Raises:
            ValueError: If the configured engine has no client implementation.
        """
        engine = self._get_engine_from_env()
        className = f"DocumentsClient{engine}"
        try:
            module = __import__(
                f"shared.clients.documents.{engine.lower()}.{className}",
                fromlist=[className],
            )
            client_class = getattr(module, className)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported documents engine specified: '{engine}'. Error: {e}")
        client = client_class(helper_config=self.helper_config, session=self.session)
        self.logging.debug(f"Instantiated documents client for engine: {engine}")
        return client

    def get_client(self) -> DocumentsClientInterface:
        """
        Returns the instantiated documents client.

        Returns:
            DocumentsClientInterface: The client instance.
        """
        return self.client
