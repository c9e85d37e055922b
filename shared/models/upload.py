"""Pydantic models for staging uploads. None of these are persisted as-is."""

import mimetypes
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from shared.models.document import DocumentType


class UploadFile(BaseModel):
    """Binary handle of a selected file. Immutable once selected."""

    model_config = ConfigDict(frozen=True)

    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path) -> "UploadFile":
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            content=path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )

    def as_httpx_file(self) -> tuple[str, bytes, str]:
        return (self.name, self.content, self.content_type)


class UploadItem(BaseModel):
    """One file of a batch together with its own metadata."""

    file: UploadFile
    title: str = ""
    description: str = ""
    document_type: DocumentType = DocumentType.OTHER


class UploadDefaults(BaseModel):
    """Metadata seeding every item of a freshly built batch."""

    title: str | None = None
    description: str | None = None
    document_type: DocumentType | None = None


class SingleUpload(BaseModel):
    """The single-file form path, used when no batch has been built."""

    title: str = ""
    description: str = ""
    document_type: DocumentType | None = DocumentType.OTHER
    file: UploadFile | None = None
