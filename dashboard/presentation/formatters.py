"""Pure formatting helpers. None of them raise on bad input."""

from datetime import date, datetime

from pytz import UnknownTimeZoneError, timezone

from shared.models.document import DocumentStatus, DocumentType

PLACEHOLDER = "—"
ELLIPSIS = "…"
DEFAULT_DATE_FORMAT = "%x"

STATUS_LABELS: dict[str, str] = {
    DocumentStatus.ACTIVE.value: "Active",
    DocumentStatus.EXPIRING_SOON.value: "Expiring Soon",
    DocumentStatus.EXPIRED.value: "Expired",
}

DOCUMENT_TYPE_LABELS: dict[str, str] = {
    DocumentType.PASSPORT.value: "Passport",
    DocumentType.LICENSE.value: "License",
    DocumentType.ID_CARD.value: "ID Card",
    DocumentType.CONTRACT.value: "Contract",
    DocumentType.CERTIFICATE.value: "Certificate",
    DocumentType.OTHER.value: "Other",
}


def _to_datetime(value: datetime | date | str) -> datetime | date:
    if isinstance(value, (datetime, date)):
        return value
    return datetime.fromisoformat(str(value).strip())


def format_date(value: datetime | date | str | None, date_format: str = DEFAULT_DATE_FORMAT, tz_name: str | None = None) -> str:
    """Format a date for display.

    Timezone-aware datetimes are shown in tz_name when given. Absent or unparseable
    input yields the placeholder.
    """
    if value is None or value == "":
        return PLACEHOLDER
    try:
        parsed = _to_datetime(value)
        if tz_name and isinstance(parsed, datetime) and parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone(tz_name))
        return parsed.strftime(date_format)
    except (TypeError, ValueError, OverflowError, UnknownTimeZoneError):
        return PLACEHOLDER


def truncate_text(text: str, limit: int, marker: str = ELLIPSIS) -> str:
    """First limit characters of text, followed by marker if anything was cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + marker


def status_label(status: str | None) -> str:
    if not status:
        return PLACEHOLDER
    return STATUS_LABELS.get(status, STATUS_LABELS[DocumentStatus.ACTIVE.value])


def document_type_label(value: DocumentType | str | None) -> str:
    if not value:
        return PLACEHOLDER
    key = value.value if isinstance(value, DocumentType) else str(value)
    return DOCUMENT_TYPE_LABELS.get(key, key)
