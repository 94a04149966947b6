# helpdesk/notification/poller.py
"""Assignment notifications by polling the full ticket list.

The first successful fetch of a session is a baseline: tickets already
assigned to the user are marked seen and nothing is emitted. Every later
fetch emits one notification per newly seen ticket id, in fetch order.
"""
import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from helpdesk.core.config import get_settings
from helpdesk.notification.models import Notification
from helpdesk.notification.sinks import NotificationCenter, SystemAlert

logger = structlog.get_logger(__name__)

FetchTickets = Callable[[], Awaitable[list[dict[str, Any]]]]


class PollerSession:
    def __init__(self, user_id: int):
        self.user_id = user_id
        self.seen_ids: set[int] = set()
        self.baseline_done = False
        self.active = True

    def end(self) -> None:
        self.active = False


class NotificationPoller:
    def __init__(
        self,
        session: PollerSession,
        fetch_tickets: FetchTickets,
        center: NotificationCenter | None = None,
        alert: Callable[[Notification], None] | None = None,
        interval: float | None = None,
    ):
        self.session = session
        self.fetch_tickets = fetch_tickets
        self.center = center or NotificationCenter()
        self.alert = alert or SystemAlert()
        self.interval = get_settings().POLL_INTERVAL_SECONDS if interval is None else interval

    def _assigned(self, tickets: list[dict[str, Any]]) -> list[dict[str, Any]]:
        user = str(self.session.user_id)
        return [t for t in tickets if str(t.get("userTo")) == user]

    async def poll_once(self) -> list[Notification]:
        session = self.session
        if not session.active:
            return []
        try:
            tickets = await self.fetch_tickets()
        except Exception as exc:
            logger.warning("notification_poll_failed", user_id=session.user_id, error=str(exc))
            return []
        if not session.active:
            logger.debug("notification_poll_discarded", user_id=session.user_id)
            return []

        mine = self._assigned(tickets)
        if not session.baseline_done:
            session.seen_ids.update(t["id"] for t in mine)
            session.baseline_done = True
            logger.info("notification_baseline", user_id=session.user_id, seen=len(session.seen_ids))
            return []

        notifications = []
        for ticket in mine:
            if ticket["id"] in session.seen_ids:
                continue
            session.seen_ids.add(ticket["id"])
            notifications.append(Notification.from_ticket(ticket))

        if notifications:
            self.center.publish(notifications)
            for notification in notifications:
                self.alert(notification)
            logger.info(
                "notifications_emitted",
                user_id=session.user_id,
                ticket_ids=[n.ticket_id for n in notifications],
            )
        return notifications

    async def run(self, stop_event: asyncio.Event) -> None:
        """Poll now, then on a fixed cadence until stopped or the session ends.

        Each cycle runs as its own task so a slow fetch never delays the next
        tick. Cycles still in flight at shutdown finish, but their results are
        discarded because the session is already ended.
        """
        in_flight: set[asyncio.Task] = set()
        while not stop_event.is_set() and self.session.active:
            task = asyncio.create_task(self.poll_once())
            in_flight.add(task)
            task.add_done_callback(in_flight.discard)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        self.session.end()
        if in_flight:
            await asyncio.gather(*in_flight)
