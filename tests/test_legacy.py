# tests/test_legacy.py
import json

from helpdesk.feedback.models import Feedback
from helpdesk.legacy import import_legacy_data, read_document
from helpdesk.ticket.models import Ticket
from helpdesk.user.models import User


def _write(path, records):
    path.write_text(json.dumps(records), encoding="utf-8")


def test_import_migrates_legacy_image(tmp_path, db):
    _write(
        tmp_path / "UserTicket.json",
        [
            {
                "id": 1,
                "userId": 1,
                "userTo": 2,
                "title": "Old",
                "description": "single image era",
                "status": "Open",
                "feedback": None,
                "image": "/uploads/old.png",
                "createdAt": "2024-05-01T10:00:00.000Z",
                "updatedAt": "2024-05-01T10:00:00.000Z",
            },
            {
                "id": 4,
                "userId": 2,
                "userTo": 1,
                "title": "New",
                "description": "array era",
                "status": "Resolved",
                "feedback": 4,
                "images": ["/uploads/a.png", "/uploads/b.png"],
                "image": None,
                "createdAt": "2024-06-01T10:00:00.000Z",
                "updatedAt": "2024-06-02T10:00:00.000Z",
            },
            {"id": 5, "title": "broken, no owner"},
        ],
    )

    counts = import_legacy_data(db, tmp_path)
    assert counts == {"users": 0, "tickets": 2, "feedback": 0}

    old = db.get(Ticket, 1)
    assert old.images == ["/uploads/old.png"]
    assert old.image is None
    assert old.category == "General"
    assert old.priority == "Medium"

    new = db.get(Ticket, 4)
    assert new.images == ["/uploads/a.png", "/uploads/b.png"]
    assert new.feedback == 4


def test_ids_continue_after_import(tmp_path, db, client):
    _write(
        tmp_path / "UserTicket.json",
        [{"id": 7, "userId": 1, "userTo": 2, "title": "t", "description": "d"}],
    )
    import_legacy_data(db, tmp_path)

    r = client.post("/api/tickets", data={"userId": "1", "title": "n", "description": "d", "userTo": "2"})
    assert r.json()["id"] == 8


def test_import_users_and_feedback(tmp_path, db):
    _write(
        tmp_path / "UserData.json",
        [
            {"id": 1, "username": "ann", "email": "ann@example.com", "password": "$2a$10$hash", "fullName": "Ann"},
            {"id": 2, "username": "ann", "email": "dup@example.com", "password": "$2a$10$hash", "fullName": "Dup"},
        ],
    )
    _write(
        tmp_path / "UserFeedback.json",
        [{"id": 1, "userId": 1, "ticketId": None, "rating": 5, "comment": "great"}],
    )

    counts = import_legacy_data(db, tmp_path)
    assert counts == {"users": 1, "tickets": 0, "feedback": 1}
    assert db.get(User, 1).full_name == "Ann"
    assert db.get(Feedback, 1).comment == "great"


def test_import_skips_populated_tables(tmp_path, db):
    _write(tmp_path / "UserTicket.json", [{"id": 1, "userId": 1, "userTo": 2, "title": "t", "description": "d"}])
    assert import_legacy_data(db, tmp_path)["tickets"] == 1
    assert import_legacy_data(db, tmp_path)["tickets"] == 0


def test_unreadable_document_is_empty(tmp_path):
    (tmp_path / "UserTicket.json").write_text("{not json", encoding="utf-8")
    assert read_document(tmp_path / "UserTicket.json") == []
    assert read_document(tmp_path / "missing.json") == []
