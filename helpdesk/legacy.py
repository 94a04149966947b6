# helpdesk/legacy.py
"""One-shot import of the flat JSON documents the helpdesk used to run on.

``UserData.json``, ``UserTicket.json`` and ``UserFeedback.json`` are read
from a directory and copied into the database when the matching table is
still empty. Ticket attachments are migrated on the way in: a legacy single
``image`` is folded into ``images`` so no imported row carries both.
"""
import json
from pathlib import Path
from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from helpdesk.core.time import parse_timestamp, utc_now
from helpdesk.feedback.models import Feedback
from helpdesk.ticket.models import Ticket, TicketCategory, TicketPriority, TicketStatus, normalize_images
from helpdesk.user.models import User

logger = structlog.get_logger(__name__)

USERS_FILE = "UserData.json"
TICKETS_FILE = "UserTicket.json"
FEEDBACK_FILE = "UserFeedback.json"


def read_document(path: Path) -> list[dict[str, Any]]:
    """Records of a JSON array document; missing or unreadable documents are empty."""
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("legacy_document_unreadable", file=str(path), error=str(exc))
        return []
    if not isinstance(data, list):
        logger.warning("legacy_document_not_a_list", file=str(path))
        return []
    return [record for record in data if isinstance(record, dict)]


def _int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _rating(value: Any) -> int | None:
    rating = _int(value)
    return rating if rating is not None and 1 <= rating <= 5 else None


def ticket_from_record(record: dict[str, Any]) -> Ticket | None:
    ticket_id = _int(record.get("id"))
    user_id = _int(record.get("userId"))
    user_to = _int(record.get("userTo"))
    if ticket_id is None or user_id is None or user_to is None:
        return None
    created = parse_timestamp(record.get("createdAt")) or utc_now()
    images = record.get("images") if isinstance(record.get("images"), list) else []
    return Ticket(
        id=ticket_id,
        user_id=user_id,
        user_to=user_to,
        title=record.get("title") or "",
        description=record.get("description") or "",
        category=record.get("category") or TicketCategory.GENERAL.value,
        priority=record.get("priority") or TicketPriority.MEDIUM.value,
        status=record.get("status") or TicketStatus.OPEN.value,
        feedback=_rating(record.get("feedback")),
        images=normalize_images(images, record.get("image")),
        image=None,
        created_at=created,
        updated_at=parse_timestamp(record.get("updatedAt")) or created,
    )


def user_from_record(record: dict[str, Any]) -> User | None:
    user_id = _int(record.get("id"))
    if user_id is None or not record.get("username") or not record.get("email") or not record.get("password"):
        return None
    return User(
        id=user_id,
        username=record["username"],
        email=record["email"],
        password=record["password"],
        full_name=record.get("fullName") or record["username"],
        created_at=parse_timestamp(record.get("createdAt")) or utc_now(),
        updated_at=parse_timestamp(record.get("updatedAt")),
    )


def feedback_from_record(record: dict[str, Any]) -> Feedback | None:
    feedback_id = _int(record.get("id"))
    user_id = _int(record.get("userId"))
    rating = _rating(record.get("rating"))
    if feedback_id is None or user_id is None or rating is None:
        return None
    return Feedback(
        id=feedback_id,
        user_id=user_id,
        ticket_id=_int(record.get("ticketId")),
        rating=rating,
        comment=record.get("comment") or "",
        created_at=parse_timestamp(record.get("createdAt")) or utc_now(),
    )


def _import(db: Session, model, records: list[dict[str, Any]], convert, unique: tuple[str, ...] = ()) -> int:
    if db.scalar(select(func.count()).select_from(model)):
        logger.info("legacy_import_skipped", table=model.__tablename__, reason="table not empty")
        return 0
    seen: set[tuple[str, Any]] = set()
    imported = 0
    for record in records:
        row = convert(record)
        keys = {(name, getattr(row, name)) for name in ("id", *unique)} if row is not None else set()
        if row is None or keys & seen:
            logger.warning("legacy_record_skipped", table=model.__tablename__, record_id=record.get("id"))
            continue
        seen.update(keys)
        db.add(row)
        imported += 1
    return imported


def import_legacy_data(db: Session, data_dir: str | Path) -> dict[str, int]:
    base = Path(data_dir)
    counts = {
        "users": _import(db, User, read_document(base / USERS_FILE), user_from_record, unique=("username", "email")),
        "tickets": _import(db, Ticket, read_document(base / TICKETS_FILE), ticket_from_record),
        "feedback": _import(db, Feedback, read_document(base / FEEDBACK_FILE), feedback_from_record),
    }
    db.commit()
    logger.info("legacy_import_done", data_dir=str(base), **counts)
    return counts
