# helpdesk/notification/models.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from helpdesk.core.time import time_ago, utc_now


@dataclass(frozen=True)
class Notification:
    id: str
    ticket_id: int
    title: str
    priority: str
    category: str
    time_ago: str
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_ticket(cls, ticket: dict[str, Any], now: datetime | None = None) -> "Notification":
        now = now or utc_now()
        return cls(
            id=f"notif-{ticket['id']}-{uuid.uuid4().hex}",
            ticket_id=ticket["id"],
            title=ticket.get("title") or "",
            priority=ticket.get("priority") or "",
            category=ticket.get("category") or "",
            time_ago=time_ago(ticket.get("createdAt"), now),
            created_at=now,
        )

    def announcement(self) -> str:
        return f"New Activity, Task ID {self.ticket_id} assigned to you"
