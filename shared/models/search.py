"""Pydantic models for the document search state."""

from pydantic import BaseModel, ConfigDict, Field

from shared.models.document import DocumentRecord

DEFAULT_PAGE_SIZE = 12


class QueryState(BaseModel):
    """Current filters and paging of the document list.

    total and the effective page are only ever taken from the server's last reply.
    Empty strings mean "no filter".
    """

    model_config = ConfigDict(validate_assignment=True)

    query: str = ""
    document_type: str = ""
    status: str = ""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    total: int = Field(default=0, ge=0)


class SearchResult(BaseModel):
    """Outcome of one search call as seen by the dashboard."""

    documents: list[DocumentRecord] = []
    total: int = 0
    page: int = 1
