"""Upload batch builder.

Turns a file selection into at most ten upload items, each carrying its own
title, description and type, and prepares the multipart body for submission.
"""

import re
from typing import Callable, Iterable

from shared.helper.HelperConfig import HelperConfig
from shared.models.document import DocumentType
from shared.models.errors import BatchSizeError, MissingInputError
from shared.models.upload import SingleUpload, UploadDefaults, UploadFile, UploadItem

MAX_BATCH_SIZE = 10
EDITABLE_FIELDS = ("title", "description", "document_type")

_EXTENSION_PATTERN = re.compile(r"\.[^/.]+$")


def title_from_filename(name: str) -> str:
    """File name with its last extension removed: "scan.2024.pdf" -> "scan.2024"."""
    return _EXTENSION_PATTERN.sub("", name)


class UploadBatchBuilder:
    def __init__(self, helper_config: HelperConfig) -> None:
        self.logging = helper_config.get_logger()
        self.max_items = helper_config.get_int_val("DASHBOARD_MAX_BATCH_SIZE", default=MAX_BATCH_SIZE, minimum=1, maximum=MAX_BATCH_SIZE)
        self.items: list[UploadItem] = []
        self._selection_cleared_listeners: list[Callable[[], None]] = []

    def __len__(self) -> int:
        return len(self.items)

    def on_selection_cleared(self, listener: Callable[[], None]) -> None:
        """Register a callback that resets the caller's file-selection widget."""
        self._selection_cleared_listeners.append(listener)

    ##########################################
    ############### BUILDING #################
    ##########################################

    def build_batch(self, files: Iterable[UploadFile], defaults: UploadDefaults | None = None) -> list[UploadItem]:
        """Replace the batch with one item per selected file, keeping the first max_items.

        Args:
            files (Iterable[UploadFile]): The selection, in order.
            defaults (UploadDefaults | None): Metadata applied to every item.

        Returns:
            list[UploadItem]: The new batch.
        """
        defaults = defaults or UploadDefaults()
        files = list(files)
        if len(files) > self.max_items:
            self.logging.info("Selected %d files, keeping the first %d.", len(files), self.max_items)

        default_title = defaults.title.strip() if defaults.title else ""
        self.items = [
            UploadItem(
                file=file,
                title=default_title or title_from_filename(file.name),
                description=defaults.description or "",
                document_type=defaults.document_type or DocumentType.OTHER,
            )
            for file in files[:self.max_items]
        ]
        return self.items

    def set_item_field(self, index: int, field: str, value) -> UploadItem:
        """Replace exactly one field of one item. Every other item stays the same object.

        Raises:
            ValueError: If field is not editable (the file never is).
            IndexError: If index is outside the batch.
        """
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Field '{field}' of an upload item cannot be edited.")
        if not 0 <= index < len(self.items):
            raise IndexError(f"Upload item {index} does not exist (batch size {len(self.items)}).")

        current = self.items[index]
        values = {
            "file": current.file,
            "title": current.title,
            "description": current.description,
            "document_type": current.document_type,
        }
        values[field] = value
        updated = UploadItem(**values)
        self.items = self.items[:index] + [updated] + self.items[index + 1:]
        return updated

    def remove_item(self, index: int) -> None:
        if not 0 <= index < len(self.items):
            raise IndexError(f"Upload item {index} does not exist (batch size {len(self.items)}).")
        self.items = self.items[:index] + self.items[index + 1:]

    def clear_batch(self) -> None:
        self.items = []
        for listener in list(self._selection_cleared_listeners):
            try:
                listener()
            except Exception:
                self.logging.exception("Selection-cleared listener %r failed.", listener)

    ##########################################
    ############## VALIDATION ################
    ##########################################

    def validate_batch(self) -> None:
        """
        Raises:
            BatchSizeError: If the batch is empty or holds more than max_items.
        """
        if not self.items:
            raise BatchSizeError("Please select at least one file to upload.")
        if len(self.items) > self.max_items:
            raise BatchSizeError(f"Maximum {self.max_items} files allowed at once.")

    def validate_single(self, upload: SingleUpload) -> None:
        """
        Raises:
            MissingInputError: If the title, the document type or the file is missing.
        """
        if upload.file is None:
            raise MissingInputError("Please select a file to upload.")
        if not upload.title.strip():
            raise MissingInputError("Please enter a title.")
        if upload.document_type is None:
            raise MissingInputError("Please choose a document type.")

    ##########################################
    ############### MULTIPART ################
    ##########################################

    def to_multipart(self) -> tuple[dict, list]:
        """Form fields and file parts for the batch, in item order.

        Returns:
            tuple[dict, list]: (data, files) as accepted by httpx.
        """
        data: dict[str, list[str]] = {"titles[]": [], "descriptions[]": [], "documentTypes[]": []}
        files: list = []
        for item in self.items:
            files.append(("files", item.file.as_httpx_file()))
            data["titles[]"].append(item.title or item.file.name)
            data["descriptions[]"].append(item.description or "")
            data["documentTypes[]"].append((item.document_type or DocumentType.OTHER).value)
        return data, files

    @staticmethod
    def single_to_multipart(upload: SingleUpload) -> tuple[dict, dict]:
        data = {
            "title": upload.title.strip(),
            "description": upload.description or "",
            "documentType": (upload.document_type or DocumentType.OTHER).value,
        }
        files = {"file": upload.file.as_httpx_file()}
        return data, files
