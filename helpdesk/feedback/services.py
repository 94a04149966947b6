# helpdesk/feedback/services.py
import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from helpdesk.core.database import committing, next_id, write_lock
from helpdesk.core.errors import NotFound, ValidationError
from helpdesk.core.time import utc_now
from helpdesk.feedback.models import Feedback
from helpdesk.feedback.schemas import FeedbackCreate

logger = structlog.get_logger(__name__)

RESOURCE = "feedback"


def create_feedback(db: Session, payload: FeedbackCreate) -> Feedback:
    if payload.user_id is None or payload.rating is None:
        raise ValidationError("UserId and rating are required")
    if not 1 <= payload.rating <= 5:
        raise ValidationError("Rating must be between 1 and 5")

    with write_lock(RESOURCE), committing(db):
        feedback = Feedback(
            id=next_id(db, Feedback),
            user_id=payload.user_id,
            ticket_id=payload.ticket_id,
            rating=payload.rating,
            comment=payload.comment or "",
            created_at=utc_now(),
        )
        db.add(feedback)
    db.refresh(feedback)
    logger.info("feedback_created", feedback_id=feedback.id, ticket_id=feedback.ticket_id)
    return feedback


def get_all_feedback(db: Session) -> list[Feedback]:
    return list(db.scalars(select(Feedback).order_by(Feedback.id)).all())


def get_feedback_for_user(db: Session, user_id: int) -> list[Feedback]:
    return list(db.scalars(select(Feedback).where(Feedback.user_id == user_id).order_by(Feedback.id)).all())


def get_feedback_for_ticket(db: Session, ticket_id: int) -> list[Feedback]:
    return list(db.scalars(select(Feedback).where(Feedback.ticket_id == ticket_id).order_by(Feedback.id)).all())


def delete_feedback(db: Session, feedback_id: int) -> None:
    with write_lock(RESOURCE), committing(db):
        feedback = db.get(Feedback, feedback_id)
        if feedback is None:
            raise NotFound("Feedback not found")
        db.delete(feedback)
    logger.info("feedback_deleted", feedback_id=feedback_id)
