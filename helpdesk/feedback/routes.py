# helpdesk/feedback/routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from helpdesk.core.database import get_db
from helpdesk.core.schemas import MessageOut
from helpdesk.feedback import services as feedback_service
from helpdesk.feedback.schemas import FeedbackCreate, FeedbackOut

router = APIRouter(prefix="/api/feedback", tags=["Feedback"])


@router.post("", response_model=FeedbackOut, status_code=201)
def create(payload: FeedbackCreate, db: Session = Depends(get_db)):
    return feedback_service.create_feedback(db, payload)


@router.get("", response_model=list[FeedbackOut])
def list_all(db: Session = Depends(get_db)):
    return feedback_service.get_all_feedback(db)


@router.get("/user/{user_id}", response_model=list[FeedbackOut])
def list_for_user(user_id: int, db: Session = Depends(get_db)):
    return feedback_service.get_feedback_for_user(db, user_id)


@router.get("/ticket/{ticket_id}", response_model=list[FeedbackOut])
def list_for_ticket(ticket_id: int, db: Session = Depends(get_db)):
    return feedback_service.get_feedback_for_ticket(db, ticket_id)


@router.delete("/{feedback_id}", response_model=MessageOut)
def delete(feedback_id: int, db: Session = Depends(get_db)):
    feedback_service.delete_feedback(db, feedback_id)
    return MessageOut(message="Feedback deleted successfully")
