from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, Field

DEFAULT_AUTO_DISMISS_MS = 4000


class Severity(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """A user-facing message on the dashboard's single notification channel."""

    text: str
    severity: Severity = Severity.SUCCESS
    auto_dismiss_ms: int = DEFAULT_AUTO_DISMISS_MS
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now - self.created_at >= timedelta(milliseconds=self.auto_dismiss_ms)
