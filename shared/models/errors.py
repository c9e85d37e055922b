"""Dashboard exceptions."""


class DashboardError(Exception):
    """Base exception for the dashboard."""


class ClientRequestError(DashboardError):
    """Raised when the documents API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None, server_message: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


class UploadValidationError(DashboardError):
    """Raised before any network call when an upload is not submittable."""


class BatchSizeError(UploadValidationError):
    pass


class MissingInputError(UploadValidationError):
    pass


class EditValidationError(DashboardError):
    """Raised before any network call when an edit cannot be saved."""


def describe_error(exc: BaseException) -> str:
    """Prefer the message the server sent, fall back to the exception text."""
    if isinstance(exc, ClientRequestError) and exc.server_message:
        return exc.server_message
    return str(exc) or exc.__class__.__name__
