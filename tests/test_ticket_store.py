# tests/test_ticket_store.py
import pytest

from helpdesk.core.errors import NotFound, ValidationError
from helpdesk.ticket import services as ticket_service
from helpdesk.ticket.models import Ticket, normalize_images
from helpdesk.ticket.schemas import TicketCreate, TicketOut, TicketUpdate


def _new(db, **overrides):
    fields = {"user_id": 1, "title": "VPN", "description": "Cannot connect", "user_to": 2}
    fields.update(overrides)
    return ticket_service.create_ticket(db, TicketCreate(**fields))


@pytest.mark.parametrize(
    "images, image, expected",
    [
        (["/uploads/a.png"], None, ["/uploads/a.png"]),
        ([], "/uploads/old.png", ["/uploads/old.png"]),
        (None, "/uploads/old.png", ["/uploads/old.png"]),
        (["/uploads/a.png"], "/uploads/old.png", ["/uploads/a.png"]),
        ([], None, []),
    ],
)
def test_normalize_images_is_idempotent(images, image, expected):
    once = normalize_images(images, image)
    assert once == expected
    assert normalize_images(once, image) == once
    assert normalize_images(once, None) == once


def test_create_requires_fields(db):
    with pytest.raises(ValidationError):
        ticket_service.create_ticket(db, TicketCreate(user_id=1, title="t", user_to=2))
    with pytest.raises(ValidationError):
        ticket_service.create_ticket(db, TicketCreate(title="t", description="d", user_to=2))


def test_get_missing_ticket_raises(db):
    with pytest.raises(NotFound):
        ticket_service.get_ticket(db, 1)


def test_update_feedback_touches_only_rating(db):
    ticket = _new(db)
    before = TicketOut.model_validate(ticket).model_dump()

    updated = ticket_service.update_feedback(db, ticket.id, 5)
    after = TicketOut.model_validate(updated).model_dump()

    assert after["feedback"] == 5
    assert after["updated_at"] >= before["updated_at"]
    for key in before:
        if key not in ("feedback", "updated_at"):
            assert after[key] == before[key]


@pytest.mark.parametrize("rating", [0, 6, None])
def test_update_feedback_range(db, rating):
    ticket = _new(db)
    with pytest.raises(ValidationError):
        ticket_service.update_feedback(db, ticket.id, rating)


def test_append_images_after_existing(db):
    ticket = _new(db)
    ticket_service.append_images(db, ticket.id, ["/uploads/1.png"])
    ticket_service.append_images(db, ticket.id, ["/uploads/2.png", "/uploads/3.png"])
    assert ticket_service.get_ticket(db, ticket.id).images == [
        "/uploads/1.png",
        "/uploads/2.png",
        "/uploads/3.png",
    ]


def test_append_images_rejects_empty(db):
    ticket = _new(db)
    with pytest.raises(ValidationError):
        ticket_service.append_images(db, ticket.id, [])


def test_update_migrates_legacy_image(db):
    db.add(Ticket(id=1, user_id=1, user_to=2, title="Old", description="Legacy", images=[], image="/uploads/old.png"))
    db.commit()

    updated = ticket_service.update_ticket(db, 1, TicketUpdate(status="In Progress"))
    assert updated.images == ["/uploads/old.png"]
    assert updated.image is None
    assert updated.status == "In Progress"


def test_update_rejects_bad_enum(db):
    ticket = _new(db)
    with pytest.raises(ValidationError):
        ticket_service.update_ticket(db, ticket.id, TicketUpdate(status="Archived"))
