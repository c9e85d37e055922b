"""Single notification channel of the dashboard.

Every operation reports its outcome here instead of raising. Front ends subscribe
to render the message and hide it once it expires.
"""

from collections import deque
from typing import Callable

from shared.helper.HelperConfig import HelperConfig
from shared.models.notification import DEFAULT_AUTO_DISMISS_MS, Notification, Severity

HISTORY_SIZE = 20


class NotificationService:
    def __init__(self, helper_config: HelperConfig) -> None:
        self.logging = helper_config.get_logger()
        self._auto_dismiss_ms = helper_config.get_int_val("DASHBOARD_NOTIFICATION_MS", default=DEFAULT_AUTO_DISMISS_MS, minimum=0)
        self._listeners: list[Callable[[Notification], None]] = []
        self.current: Notification | None = None
        self.history: deque[Notification] = deque(maxlen=HISTORY_SIZE)

    def subscribe(self, listener: Callable[[Notification], None]) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[Notification], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self, text: str, severity: Severity = Severity.SUCCESS) -> Notification:
        """Replace the visible notification and tell every listener."""
        notification = Notification(text=text, severity=severity, auto_dismiss_ms=self._auto_dismiss_ms)
        self.current = notification
        self.history.append(notification)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                self.logging.exception("Notification listener %r failed.", listener)
        return notification

    def success(self, text: str) -> Notification:
        return self.notify(text, Severity.SUCCESS)

    def warning(self, text: str) -> Notification:
        return self.notify(text, Severity.WARNING)

    def error(self, text: str) -> Notification:
        return self.notify(text, Severity.ERROR)

    def dismiss(self) -> None:
        self.current = None

    def visible(self) -> Notification | None:
        """The current notification, or None once its auto-dismiss duration has passed."""
        if self.current is not None and self.current.is_expired():
            self.current = None
        return self.current
