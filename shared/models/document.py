"""Pydantic models for document data.

Hierarchy:
  DocumentRecord       : server-owned document with expiry metadata, as cached by the dashboard.
  SectionExpiry        : a named sub-expiration inside a document (e.g. a visa page).
  DocumentsListResponse: parsed listing reply; documents is None when the reply lacked the field.
  DocumentStats        : aggregate counts over the whole collection.
  MutationResult       : normalized reply of a create/update call: Records(list) or Empty.
  EditDraft            : editable copy of a record while the edit form is open.
"""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_REMINDER_DAYS = 30


class DocumentType(str, Enum):
    PASSPORT = "passport"
    LICENSE = "license"
    ID_CARD = "id_card"
    CONTRACT = "contract"
    CERTIFICATE = "certificate"
    OTHER = "other"


class DocumentStatus(str, Enum):
    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


class SectionExpiry(BaseModel):
    """A named part of a document with its own expiry.

    raw_expiry carries the unparsed text the server found when it could not resolve a date.
    """

    header: str | None = None
    expiry_date: datetime | None = None
    raw_expiry: str | None = None


class DocumentRecord(BaseModel):
    """
    A single document as returned by the documents API.

    expiry_date, section_expiries, extracted_text and status are derived on the server
    and are never sent back by the client. status is kept verbatim, it is not recomputed.
    """

    id: str
    title: str
    description: str = ""
    document_type: DocumentType = DocumentType.OTHER
    expiry_date: datetime | None = None
    section_expiries: list[SectionExpiry] = []
    status: str | None = None
    extracted_text: str | None = None
    reminder_days: int = Field(default=DEFAULT_REMINDER_DAYS, ge=0)


class DocumentsListResponse(BaseModel):
    """
    Represents the response of a document listing or search request.
    """

    documents: list[DocumentRecord] | None = None
    total: int | None = None
    page: int | None = None


class DocumentStats(BaseModel):
    """Counts scoped to the user's full collection, independent of filters and paging."""

    total: int = 0
    active: int = 0
    expiring_soon: int = 0
    expired: int = 0


class MutationResult(BaseModel):
    """Tagged result of a create or update call.

    kind == "records": the server returned canonical records, in server order.
    kind == "empty": the reply carried no usable record and the caller must re-fetch.
    """

    kind: Literal["records", "empty"]
    documents: list[DocumentRecord] = []

    @classmethod
    def records(cls, documents: list[DocumentRecord]) -> "MutationResult":
        if not documents:
            return cls.empty()
        return cls(kind="records", documents=documents)

    @classmethod
    def empty(cls) -> "MutationResult":
        return cls(kind="empty")

    @property
    def is_empty(self) -> bool:
        return self.kind == "empty"


class EditDraft(BaseModel):
    """Editable copy of a DocumentRecord.

    reminder_days holds raw form input (e.g. "45") until the edit is saved.
    """

    model_config = ConfigDict(validate_assignment=True)

    original: DocumentRecord
    title: str
    description: str = ""
    document_type: DocumentType = DocumentType.OTHER
    reminder_days: int | str | None = DEFAULT_REMINDER_DAYS

    @classmethod
    def from_record(cls, record: DocumentRecord) -> "EditDraft":
        return cls(
            original=record,
            title=record.title,
            description=record.description,
            document_type=record.document_type,
            reminder_days=record.reminder_days,
        )

    @property
    def id(self) -> str:
        return self.original.id
