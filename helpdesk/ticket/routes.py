# helpdesk/ticket/routes.py
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from helpdesk.core.database import get_db
from helpdesk.core.errors import HelpdeskError, ValidationError
from helpdesk.ticket import services as ticket_service
from helpdesk.ticket.schemas import (
    FeedbackUpdate,
    ImagesAdded,
    TicketCreate,
    TicketOut,
    TicketUpdate,
    TransitionsOut,
)
from helpdesk.ticket.uploads import remove_upload, save_image, save_images

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


@router.post("", response_model=TicketOut, status_code=201)
def create(
    user_id: int | None = Form(default=None, alias="userId"),
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    user_to: int | None = Form(default=None, alias="userTo"),
    category: str | None = Form(default=None),
    priority: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
):
    payload = TicketCreate(
        user_id=user_id,
        title=title,
        description=description,
        user_to=user_to,
        category=category,
        priority=priority,
    )
    stored = save_image(image) if image is not None and image.filename else None
    try:
        return ticket_service.create_ticket(db, payload, stored)
    except HelpdeskError:
        remove_upload(stored)
        raise


@router.get("", response_model=list[TicketOut])
def list_all(
    status: str | None = Query(default=None, description="Filter by status: Open, In Progress, Resolved, Closed"),
    db: Session = Depends(get_db),
):
    return ticket_service.get_all_tickets(db, status)


@router.get("/user/{user_id}", response_model=list[TicketOut])
def list_for_user(user_id: int, db: Session = Depends(get_db)):
    return ticket_service.get_tickets_for_user(db, user_id)


@router.get("/{ticket_id}", response_model=TicketOut)
def get(ticket_id: int, db: Session = Depends(get_db)):
    return ticket_service.get_ticket(db, ticket_id)


@router.get("/{ticket_id}/transitions", response_model=TransitionsOut)
def transitions(ticket_id: int, db: Session = Depends(get_db)):
    ticket, allowed = ticket_service.allowed_transitions(db, ticket_id)
    return TransitionsOut(id=ticket.id, status=ticket.status, allowed=allowed)


@router.put("/{ticket_id}/feedback", response_model=TicketOut)
def submit_feedback(ticket_id: int, body: FeedbackUpdate, db: Session = Depends(get_db)):
    return ticket_service.update_feedback(db, ticket_id, body.feedback)


@router.put("/{ticket_id}", response_model=TicketOut)
def update(
    ticket_id: int,
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    category: str | None = Form(default=None),
    priority: str | None = Form(default=None),
    status: str | None = Form(default=None),
    user_to: int | None = Form(default=None, alias="userTo"),
    feedback: int | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
):
    payload = TicketUpdate(
        title=title,
        description=description,
        category=category,
        priority=priority,
        status=status,
        user_to=user_to,
        feedback=feedback,
    )
    stored = save_image(image) if image is not None and image.filename else None
    try:
        return ticket_service.update_ticket(db, ticket_id, payload, stored)
    except HelpdeskError:
        remove_upload(stored)
        raise


@router.post("/{ticket_id}/images", response_model=ImagesAdded)
def add_images(
    ticket_id: int,
    images: list[UploadFile] = File(default=[]),
    db: Session = Depends(get_db),
):
    files = [f for f in images if f.filename]
    if not files:
        raise ValidationError("No images provided")
    # Reject unknown tickets before writing anything to disk
    ticket_service.get_ticket(db, ticket_id)
    stored = save_images(files)
    try:
        ticket = ticket_service.append_images(db, ticket_id, stored)
    except HelpdeskError:
        for path in stored:
            remove_upload(path)
        raise
    out = TicketOut.model_validate(ticket)
    return ImagesAdded(message="Images added successfully", images=out.images, ticket=out)


@router.delete("/{ticket_id}", response_model=TicketOut)
def delete(ticket_id: int, db: Session = Depends(get_db)):
    return ticket_service.delete_ticket(db, ticket_id)
