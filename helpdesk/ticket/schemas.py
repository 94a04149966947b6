# helpdesk/ticket/schemas.py
from datetime import datetime

from pydantic import BaseModel, model_validator

from helpdesk.core.schemas import CamelIn, CamelOut
from helpdesk.ticket.models import normalize_images


class TicketCreate(BaseModel):
    # Presence is checked by the service so a missing field is a 400, not a 422
    user_id: int | None = None
    title: str | None = None
    description: str | None = None
    user_to: int | None = None
    category: str | None = None
    priority: str | None = None


class TicketUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    priority: str | None = None
    status: str | None = None
    user_to: int | None = None
    feedback: int | None = None


class FeedbackUpdate(CamelIn):
    # Missing or out of range is rejected by the service as a 400
    feedback: int | None = None


class TicketOut(CamelOut):
    id: int
    user_id: int
    user_to: int
    title: str
    description: str
    category: str
    priority: str
    status: str
    feedback: int | None = None
    images: list[str] = []
    image: str | None = None
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def _normalize_images(self):
        self.images = normalize_images(self.images, self.image)
        return self


class ImagesAdded(CamelOut):
    message: str
    images: list[str]
    ticket: TicketOut


class TransitionsOut(CamelOut):
    id: int
    status: str
    allowed: list[str]
