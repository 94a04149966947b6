# helpdesk/ticket/services.py
import enum

import structlog
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from helpdesk.core.config import get_settings
from helpdesk.core.database import committing, next_id, write_lock
from helpdesk.core.errors import NotFound, ValidationError
from helpdesk.core.time import utc_now
from helpdesk.ticket.models import (
    STATUS_TRANSITIONS,
    Ticket,
    TicketCategory,
    TicketPriority,
    TicketStatus,
    normalize_images,
)
from helpdesk.ticket.schemas import TicketCreate, TicketOut, TicketUpdate
from helpdesk.ticket.uploads import remove_upload

logger = structlog.get_logger(__name__)

RESOURCE = "tickets"


def _choice(value: str, choices: type[enum.Enum], field: str) -> str:
    allowed = [c.value for c in choices]
    if value not in allowed:
        raise ValidationError(f"Invalid {field} '{value}', expected one of: {', '.join(allowed)}")
    return value


def _check_rating(rating: int | None) -> int:
    if rating is None or not 1 <= rating <= 5:
        raise ValidationError("Feedback must be between 1 and 5")
    return rating


def find_ticket(db: Session, ticket_id: int) -> Ticket | None:
    return db.get(Ticket, ticket_id)


def get_ticket(db: Session, ticket_id: int) -> Ticket:
    ticket = find_ticket(db, ticket_id)
    if ticket is None:
        raise NotFound("Ticket not found")
    return ticket


def get_all_tickets(db: Session, status: str | None = None) -> list[Ticket]:
    query = select(Ticket).order_by(Ticket.id)
    if status:
        query = query.where(Ticket.status == status)
    return list(db.scalars(query).all())


def get_tickets_for_user(db: Session, user_id: int) -> list[Ticket]:
    """Tickets the user created or is assigned to."""
    query = (
        select(Ticket)
        .where(or_(Ticket.user_id == user_id, Ticket.user_to == user_id))
        .order_by(Ticket.id)
    )
    tickets = list(db.scalars(query).all())
    logger.info("tickets_for_user", user_id=user_id, count=len(tickets))
    return tickets


def create_ticket(db: Session, payload: TicketCreate, image: str | None = None) -> Ticket:
    if (
        payload.user_id is None
        or payload.user_to is None
        or not (payload.title or "").strip()
        or not (payload.description or "").strip()
    ):
        raise ValidationError("All required fields must be provided: userId, title, description, userTo")

    category = _choice(payload.category or TicketCategory.GENERAL.value, TicketCategory, "category")
    priority = _choice(payload.priority or TicketPriority.MEDIUM.value, TicketPriority, "priority")

    with write_lock(RESOURCE), committing(db):
        now = utc_now()
        db_ticket = Ticket(
            id=next_id(db, Ticket),
            user_id=payload.user_id,
            user_to=payload.user_to,
            title=payload.title,
            description=payload.description,
            category=category,
            priority=priority,
            status=TicketStatus.OPEN.value,
            feedback=None,
            images=[image] if image else [],
            image=None,
            created_at=now,
            updated_at=now,
        )
        db.add(db_ticket)
    db.refresh(db_ticket)
    logger.info("ticket_created", ticket_id=db_ticket.id, user_id=db_ticket.user_id, user_to=db_ticket.user_to)
    return db_ticket


def update_ticket(
    db: Session, ticket_id: int, payload: TicketUpdate, new_image: str | None = None
) -> Ticket:
    changes = payload.model_dump(exclude_none=True)
    for field in ("title", "description"):
        if field in changes and not changes[field].strip():
            raise ValidationError("Title and description are required")
    if "category" in changes:
        _choice(changes["category"], TicketCategory, "category")
    if "priority" in changes:
        _choice(changes["priority"], TicketPriority, "priority")
    if "status" in changes:
        _choice(changes["status"], TicketStatus, "status")
    if "feedback" in changes:
        _check_rating(changes["feedback"])

    with write_lock(RESOURCE), committing(db):
        db_ticket = get_ticket(db, ticket_id)

        new_status = changes.get("status")
        if (
            new_status
            and new_status != db_ticket.status
            and get_settings().ENFORCE_STATUS_TRANSITIONS
            and new_status not in STATUS_TRANSITIONS.get(db_ticket.status, ())
        ):
            raise ValidationError(f"Cannot move ticket from {db_ticket.status} to {new_status}")

        for field, value in changes.items():
            setattr(db_ticket, field, value)

        images = normalize_images(db_ticket.images, db_ticket.image)
        if new_image:
            images.append(new_image)
        db_ticket.images = images
        db_ticket.image = None
        db_ticket.updated_at = utc_now()
    db.refresh(db_ticket)
    logger.info("ticket_updated", ticket_id=ticket_id, fields=sorted(changes), image_added=bool(new_image))
    return db_ticket


def update_feedback(db: Session, ticket_id: int, rating: int | None) -> Ticket:
    """Set only the star rating; every other field is left untouched."""
    _check_rating(rating)
    with write_lock(RESOURCE), committing(db):
        db_ticket = get_ticket(db, ticket_id)
        db_ticket.feedback = rating
        db_ticket.updated_at = utc_now()
    db.refresh(db_ticket)
    logger.info("ticket_feedback", ticket_id=ticket_id, rating=rating)
    return db_ticket


def append_images(db: Session, ticket_id: int, paths: list[str]) -> Ticket:
    if not paths:
        raise ValidationError("No images provided")
    with write_lock(RESOURCE), committing(db):
        db_ticket = get_ticket(db, ticket_id)
        db_ticket.images = normalize_images(db_ticket.images, db_ticket.image) + list(paths)
        db_ticket.image = None
        db_ticket.updated_at = utc_now()
    db.refresh(db_ticket)
    logger.info("ticket_images_added", ticket_id=ticket_id, count=len(paths))
    return db_ticket


def delete_ticket(db: Session, ticket_id: int) -> TicketOut:
    with write_lock(RESOURCE), committing(db):
        db_ticket = get_ticket(db, ticket_id)
        deleted = TicketOut.model_validate(db_ticket)
        attachments = normalize_images(db_ticket.images, None)
        if db_ticket.image and db_ticket.image not in attachments:
            attachments.append(db_ticket.image)
        db.delete(db_ticket)

    removed = sum(1 for path in attachments if remove_upload(path))
    logger.info("ticket_deleted", ticket_id=ticket_id, files_removed=removed)
    return deleted


def allowed_transitions(db: Session, ticket_id: int) -> tuple[Ticket, list[str]]:
    db_ticket = get_ticket(db, ticket_id)
    return db_ticket, list(STATUS_TRANSITIONS.get(db_ticket.status, ()))
