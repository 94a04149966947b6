# helpdesk/feedback/schemas.py
from datetime import datetime

from helpdesk.core.schemas import CamelIn, CamelOut


class FeedbackCreate(CamelIn):
    user_id: int | None = None
    ticket_id: int | None = None
    rating: int | None = None
    comment: str | None = None


class FeedbackOut(CamelOut):
    id: int
    user_id: int
    ticket_id: int | None = None
    rating: int
    comment: str
    created_at: datetime
