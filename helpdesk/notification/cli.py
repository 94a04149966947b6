# helpdesk/notification/cli.py
import argparse
import asyncio
import signal

from helpdesk.core.config import get_settings
from helpdesk.core.logging import setup_logging
from helpdesk.notification.client import HelpdeskClient
from helpdesk.notification.models import Notification
from helpdesk.notification.poller import NotificationPoller, PollerSession
from helpdesk.notification.sinks import NotificationCenter, SystemAlert, desktop_notify, log_announcement


def print_notification(notification: Notification) -> None:
    print(
        f"New ticket assigned: #{notification.ticket_id} - {notification.title} "
        f"(Priority: {notification.priority}, Category: {notification.category}, {notification.time_ago})"
    )


async def _watch(user_id: int, base_url: str, interval: float, desktop: bool) -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    notifiers = [print_notification, log_announcement]
    if desktop:
        notifiers.append(desktop_notify)

    async with HelpdeskClient(base_url) as client:
        poller = NotificationPoller(
            PollerSession(user_id),
            client.list_all_tickets,
            center=NotificationCenter(),
            alert=SystemAlert(*notifiers),
            interval=interval,
        )
        await poller.run(stop)


def _parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Watch for tickets newly assigned to a user.")
    parser.add_argument("--user-id", type=int, required=True, help="Assignee to watch for.")
    parser.add_argument("--base-url", default=settings.API_BASE_URL, help="Helpdesk API base URL.")
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.POLL_INTERVAL_SECONDS,
        help="Seconds between polls.",
    )
    parser.add_argument("--desktop", action="store_true", help="Also raise desktop notifications.")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    if args.interval <= 0:
        raise SystemExit("--interval must be positive")
    setup_logging()
    asyncio.run(_watch(args.user_id, args.base_url, args.interval, args.desktop))


if __name__ == "__main__":
    main()
