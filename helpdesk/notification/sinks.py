# helpdesk/notification/sinks.py
import shutil
import subprocess
import time
from collections.abc import Callable, Iterable

import structlog

from helpdesk.core.config import get_settings
from helpdesk.notification.models import Notification

logger = structlog.get_logger(__name__)


class ToastSink:
    """Short-lived notifications; each entry expires ``ttl`` seconds after it was pushed."""

    def __init__(self, ttl: float | None = None, clock: Callable[[], float] = time.monotonic):
        self.ttl = get_settings().TOAST_TTL_SECONDS if ttl is None else ttl
        self._clock = clock
        self._entries: list[tuple[float, Notification]] = []

    def push(self, notifications: Iterable[Notification]) -> None:
        self._prune()
        expires = self._clock() + self.ttl
        self._entries.extend((expires, n) for n in notifications)

    def _prune(self) -> None:
        now = self._clock()
        self._entries = [(expires, n) for expires, n in self._entries if expires > now]

    @property
    def items(self) -> list[Notification]:
        self._prune()
        return [n for _, n in self._entries]

    def dismiss(self, notification_id: str) -> bool:
        before = len(self._entries)
        self._entries = [(e, n) for e, n in self._entries if n.id != notification_id]
        return len(self._entries) != before


class PanelSink:
    """Notification list kept until dismissed; newest batch first, oldest dropped past ``max_items``."""

    def __init__(self, max_items: int | None = None):
        self.max_items = get_settings().PANEL_MAX_ITEMS if max_items is None else max_items
        self._items: list[Notification] = []

    def push(self, notifications: Iterable[Notification]) -> None:
        self._items = (list(notifications) + self._items)[: self.max_items]

    @property
    def items(self) -> list[Notification]:
        return list(self._items)

    def dismiss(self, notification_id: str) -> bool:
        before = len(self._items)
        self._items = [n for n in self._items if n.id != notification_id]
        return len(self._items) != before

    def clear(self) -> None:
        self._items = []


class NotificationCenter:
    def __init__(self, toasts: ToastSink | None = None, panel: PanelSink | None = None):
        self.toasts = toasts or ToastSink()
        self.panel = panel or PanelSink()

    def publish(self, notifications: list[Notification]) -> None:
        self.toasts.push(notifications)
        self.panel.push(notifications)

    @property
    def count(self) -> int:
        return len(self.panel.items)

    def dismiss(self, notification_id: str) -> None:
        self.toasts.dismiss(notification_id)
        self.panel.dismiss(notification_id)

    def clear_all(self) -> None:
        self.panel.clear()

    def open(self, notification_id: str) -> int | None:
        """Dismiss a notification everywhere and return the ticket id to show."""
        ticket_id = next(
            (n.ticket_id for n in self.panel.items + self.toasts.items if n.id == notification_id),
            None,
        )
        self.dismiss(notification_id)
        return ticket_id


def log_announcement(notification: Notification) -> None:
    logger.info("ticket_assigned", ticket_id=notification.ticket_id, announcement=notification.announcement())


def desktop_notify(notification: Notification) -> None:
    # No-op where notify-send is not installed
    binary = shutil.which("notify-send")
    if binary is None:
        return
    # Fire and forget; the poll loop must not wait on the desktop
    subprocess.Popen(
        [
            binary,
            "New Ticket Assigned",
            f"#{notification.ticket_id} - {notification.title}\nPriority: {notification.priority}",
        ],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )


class SystemAlert:
    """Best-effort host alert; failures are logged and otherwise ignored."""

    def __init__(self, *notifiers: Callable[[Notification], None]):
        self._notifiers = notifiers or (log_announcement,)

    def __call__(self, notification: Notification) -> None:
        for notify in self._notifiers:
            try:
                notify(notification)
            except Exception as exc:
                logger.warning("system_alert_failed", ticket_id=notification.ticket_id, error=str(exc))
