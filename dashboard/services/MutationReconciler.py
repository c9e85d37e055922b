"""Mutation reconciler.

Applies create, update and delete against the cached document list. Server
records are preferred over local guesses; when a reply carries no record the
list is re-fetched instead. Every operation runs its steps in order
(mutate → stats → page → UI state), reports through the notification channel
and never raises.
"""

import inspect
from typing import Awaitable, Callable

from dashboard.services.CollectionQueryService import CollectionQueryService
from dashboard.services.NotificationService import NotificationService
from dashboard.services.StatsService import StatsService
from dashboard.services.UploadBatchBuilder import UploadBatchBuilder
from shared.clients.documents.DocumentsClientInterface import DocumentsClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import DEFAULT_REMINDER_DAYS, DocumentRecord, EditDraft, MutationResult
from shared.models.errors import EditValidationError, UploadValidationError, describe_error
from shared.models.upload import SingleUpload

ConfirmCallback = Callable[[str], bool | Awaitable[bool]]

DELETE_CONFIRMATION = "Delete this document?"


def coerce_reminder_days(value) -> int:
    """Turn raw form input into a reminder period. Blank input means the default.

    Raises:
        EditValidationError: If the value is not a non-negative whole number.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_REMINDER_DAYS
    if isinstance(value, bool):
        raise EditValidationError(f"Reminder days must be a whole number, got {value!r}.")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    try:
        days = value if isinstance(value, int) else int(str(value).strip())
    except ValueError:
        raise EditValidationError(f"Reminder days must be a whole number, got {value!r}.")
    if days < 0:
        raise EditValidationError(f"Reminder days cannot be negative, got {days}.")
    return days


class MutationReconciler:
    def __init__(
        self,
        helper_config: HelperConfig,
        documents_client: DocumentsClientInterface,
        query_service: CollectionQueryService,
        stats_service: StatsService,
        batch_builder: UploadBatchBuilder,
        notifications: NotificationService,
        confirm: ConfirmCallback | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._client = documents_client
        self._query = query_service
        self._stats = stats_service
        self._batch = batch_builder
        self._notifications = notifications
        self._confirm = confirm
        self.editing: EditDraft | None = None

    ##########################################
    ################ CREATE ##################
    ##########################################

    async def create_batch(self) -> bool:
        """Upload every item of the current batch in one multipart request."""
        try:
            self._batch.validate_batch()
        except UploadValidationError as e:
            self._notifications.warning(str(e))
            return False
        data, files = self._batch.to_multipart()
        self.logging.info("Uploading batch of %d document(s).", len(self._batch))
        return await self._submit_create(data, files)

    async def create_single(self, upload: SingleUpload) -> bool:
        """Upload one file through the single-file form path."""
        try:
            self._batch.validate_single(upload)
        except UploadValidationError as e:
            self._notifications.warning(str(e))
            return False
        data, files = self._batch.single_to_multipart(upload)
        self.logging.info("Uploading single document '%s'.", data["title"])
        return await self._submit_create(data, files)

    async def _submit_create(self, data: dict, files) -> bool:
        try:
            result = await self._client.do_create_documents(data=data, files=files)
        except Exception as e:
            self.logging.error("Upload failed: %s", e)
            self._notifications.error(f"Upload failed: {describe_error(e)}")
            return False

        if result.is_empty:
            self.logging.info("Upload response carried no documents, reloading the first page.")
            await self._query.search(page=1)
            message = "Uploaded successfully (reloaded list)."
        else:
            self._query.prepend_documents(result.documents)
            message = f"Uploaded {len(result.documents)} document(s) successfully!"
        self._batch.clear_batch()
        await self._stats.fetch_stats()
        self._notifications.success(message)
        return True

    ##########################################
    ################ UPDATE ##################
    ##########################################

    def begin_edit(self, record: DocumentRecord) -> EditDraft:
        self.editing = EditDraft.from_record(record)
        return self.editing

    def set_edit_field(self, field: str, value) -> None:
        if self.editing is None:
            raise EditValidationError("No document is being edited.")
        if field not in ("title", "description", "document_type", "reminder_days"):
            raise ValueError(f"Field '{field}' of a document cannot be edited.")
        setattr(self.editing, field, value)

    def cancel_edit(self) -> None:
        self.editing = None

    async def save_edit(self) -> bool:
        """Send the open draft. The draft stays open if anything fails."""
        draft = self.editing
        if draft is None:
            return False
        try:
            reminder_days = coerce_reminder_days(draft.reminder_days)
        except EditValidationError as e:
            self._notifications.warning(str(e))
            return False

        payload = {
            "title": draft.title,
            "description": draft.description,
            "documentType": draft.document_type.value,
            "reminderDays": reminder_days,
        }
        try:
            result = await self._client.do_update_document(draft.id, payload)
        except Exception as e:
            self.logging.error("Update of document %s failed: %s", draft.id, e)
            self._notifications.error(f"Update failed: {describe_error(e)}")
            return False

        updated = self._reconcile_update(draft, result, reminder_days)
        if not self._query.replace_document(updated):
            self.logging.debug("Updated document %s is not on the current page.", updated.id)

        await self._stats.fetch_stats()
        await self._query.refresh()
        self.editing = None
        self._notifications.success("Updated successfully")
        return True

    def _reconcile_update(self, draft: EditDraft, result: MutationResult, reminder_days: int) -> DocumentRecord:
        """The server record when there is one, else the submitted fields over the previous copy."""
        if not result.is_empty:
            return result.documents[0]
        self.logging.info("Update response for %s carried no document, merging the submitted fields.", draft.id)
        return draft.original.model_copy(
            update={
                "title": draft.title,
                "description": draft.description,
                "document_type": draft.document_type,
                "reminder_days": reminder_days,
            }
        )

    ##########################################
    ################ DELETE ##################
    ##########################################

    async def delete(self, document_id: str) -> bool:
        """Delete after explicit confirmation. A declined confirmation is a silent no-op."""
        if not await self._ask_confirmation(DELETE_CONFIRMATION):
            self.logging.debug("Delete of document %s cancelled.", document_id)
            return False
        try:
            await self._client.do_delete_document(document_id)
        except Exception as e:
            self.logging.error("Delete of document %s failed: %s", document_id, e)
            self._notifications.error(f"Delete failed: {describe_error(e)}")
            return False

        self._query.remove_document(document_id)
        if self.editing is not None and self.editing.id == document_id:
            self.editing = None
        await self._stats.fetch_stats()
        await self._query.refresh()
        self._notifications.success("Deleted successfully")
        return True

    async def _ask_confirmation(self, question: str) -> bool:
        if self._confirm is None:
            self.logging.warning("No confirmation handler configured, refusing to delete.")
            return False
        try:
            answer = self._confirm(question)
            if inspect.isawaitable(answer):
                answer = await answer
        except Exception:
            # a broken prompt counts as a declined confirmation
            self.logging.exception("Confirmation handler failed, not deleting.")
            return False
        return bool(answer)
