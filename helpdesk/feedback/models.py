# helpdesk/feedback/models.py
from sqlalchemy import Column, DateTime, Integer, String

from helpdesk.core.database import Base
from helpdesk.core.time import utc_now


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True, autoincrement=False)
    user_id = Column(Integer, index=True, nullable=False)
    ticket_id = Column(Integer, index=True, nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(String, default="", nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
