# helpdesk/ticket/models.py
import enum

from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.ext.mutable import MutableList

from helpdesk.core.database import Base
from helpdesk.core.time import utc_now


class TicketStatus(str, enum.Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class TicketPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class TicketCategory(str, enum.Enum):
    GENERAL = "General"
    TOUR = "Tour"
    TECHNICAL = "Technical Change Require"
    FEATURE = "New Development Request"
    CHANGE = "Functional Change Request"
    MEETING = "Meeting Schedule"
    BUG = "Bug Report"


# Offered transitions; Closed is terminal
STATUS_TRANSITIONS: dict[str, tuple[str, ...]] = {
    TicketStatus.OPEN.value: (
        TicketStatus.IN_PROGRESS.value,
        TicketStatus.RESOLVED.value,
        TicketStatus.CLOSED.value,
    ),
    TicketStatus.IN_PROGRESS.value: (
        TicketStatus.RESOLVED.value,
        TicketStatus.CLOSED.value,
        TicketStatus.OPEN.value,
    ),
    TicketStatus.RESOLVED.value: (TicketStatus.CLOSED.value,),
    TicketStatus.CLOSED.value: (),
}


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True, autoincrement=False)
    user_id = Column(Integer, index=True, nullable=False)
    user_to = Column(Integer, index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    category = Column(String, default=TicketCategory.GENERAL.value, nullable=False)
    priority = Column(String, default=TicketPriority.MEDIUM.value, nullable=False)
    status = Column(String, default=TicketStatus.OPEN.value, index=True, nullable=False)
    feedback = Column(Integer, nullable=True)
    images = Column(MutableList.as_mutable(JSON), default=list, nullable=False)
    # Flat-file era single attachment; folded into images on every attachment write
    image = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)


def normalize_images(images, image) -> list[str]:
    """Current attachment list of a record that may still carry a legacy ``image``.

    A non-empty ``images`` sequence wins; otherwise a set ``image`` becomes a
    one-element list; otherwise empty. Idempotent: feeding the result back in
    as ``images`` yields the same list.
    """
    if images:
        return list(images)
    if image:
        return [image]
    return []
