"""Presentation derivation: what a document row looks like, computed from the raw record.

All functions are total over their inputs. Status is taken as the server sent it.
"""

from enum import Enum

from pydantic import BaseModel

from dashboard.presentation.formatters import (
    DEFAULT_DATE_FORMAT,
    PLACEHOLDER,
    document_type_label,
    format_date,
    status_label,
    truncate_text,
)
from shared.models.document import DocumentRecord, DocumentStatus

SNIPPET_LENGTH = 300
NO_SNIPPET_TEXT = "No detected expiry snippet available."


class Tone(str, Enum):
    DANGER = "danger"
    WARNING = "warning"
    SUCCESS = "success"
    NEUTRAL = "neutral"


class StatusChip(BaseModel):
    label: str
    tone: Tone


class RowEmphasis(BaseModel):
    tone: Tone
    background: str


class DocumentRow(BaseModel):
    """Everything a table row of the dashboard shows for one document."""

    id: str
    title: str
    type_label: str
    expiry: str
    section_expiries: list[str]
    chip: StatusChip
    emphasis: RowEmphasis
    expanded: bool = False
    snippet: str | None = None


_ROW_EMPHASIS: dict[str, RowEmphasis] = {
    DocumentStatus.EXPIRED.value: RowEmphasis(tone=Tone.DANGER, background="#fff0f0"),
    DocumentStatus.EXPIRING_SOON.value: RowEmphasis(tone=Tone.WARNING, background="#fffaf0"),
}
_NO_EMPHASIS = RowEmphasis(tone=Tone.NEUTRAL, background="inherit")


def status_chip(status: str | None) -> StatusChip:
    if not status:
        return StatusChip(label=PLACEHOLDER, tone=Tone.NEUTRAL)
    if status == DocumentStatus.EXPIRED:
        return StatusChip(label=status_label(status), tone=Tone.DANGER)
    if status == DocumentStatus.EXPIRING_SOON:
        return StatusChip(label=status_label(status), tone=Tone.WARNING)
    # anything else the server sends counts as active
    return StatusChip(label=status_label(status), tone=Tone.SUCCESS)


def row_emphasis(status: str | None) -> RowEmphasis:
    if not status:
        return _NO_EMPHASIS
    return _ROW_EMPHASIS.get(status, _NO_EMPHASIS)


def section_expiry_summary(record: DocumentRecord, date_format: str = DEFAULT_DATE_FORMAT, tz_name: str | None = None) -> list[str]:
    """One "<header>: <expiry>" line per section, or a single placeholder line."""
    if not record.section_expiries:
        return [PLACEHOLDER]
    lines = []
    for position, section in enumerate(record.section_expiries, start=1):
        header = section.header or f"Section {position}"
        if section.expiry_date is not None:
            value = format_date(section.expiry_date, date_format=date_format, tz_name=tz_name)
        else:
            value = section.raw_expiry or PLACEHOLDER
        lines.append(f"{header}: {value}")
    return lines


def expiry_snippet(record: DocumentRecord) -> str:
    if not record.extracted_text:
        return NO_SNIPPET_TEXT
    return truncate_text(record.extracted_text, SNIPPET_LENGTH)


def build_row(record: DocumentRecord, expanded: bool = False, date_format: str = DEFAULT_DATE_FORMAT, tz_name: str | None = None) -> DocumentRow:
    """The snippet is only derived for expanded rows."""
    return DocumentRow(
        id=record.id,
        title=record.title,
        type_label=document_type_label(record.document_type),
        expiry=format_date(record.expiry_date, date_format=date_format, tz_name=tz_name),
        section_expiries=section_expiry_summary(record, date_format=date_format, tz_name=tz_name),
        chip=status_chip(record.status),
        emphasis=row_emphasis(record.status),
        expanded=expanded,
        snippet=expiry_snippet(record) if expanded else None,
    )
