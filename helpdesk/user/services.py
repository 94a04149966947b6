# helpdesk/user/services.py
import structlog
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from helpdesk.core.database import committing, next_id, write_lock
from helpdesk.core.errors import Conflict, NotFound, Unauthorized, ValidationError
from helpdesk.core.time import utc_now
from helpdesk.user.models import User
from helpdesk.user.schemas import PasswordChange, UserLogin, UserRegister
from helpdesk.user.security import hash_password, needs_rehash, verify_password

logger = structlog.get_logger(__name__)

RESOURCE = "users"


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def get_all_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(User.id)).all())


def register_user(db: Session, payload: UserRegister) -> User:
    if not all([payload.username, payload.email, payload.password, payload.full_name]):
        raise ValidationError("All fields are required")

    with write_lock(RESOURCE), committing(db):
        existing = db.scalars(
            select(User).where(or_(User.email == payload.email, User.username == payload.username))
        ).first()
        if existing is not None:
            raise Conflict("User already exists")
        user = User(
            id=next_id(db, User),
            username=payload.username,
            email=payload.email,
            password=hash_password(payload.password),
            full_name=payload.full_name,
            created_at=utc_now(),
        )
        db.add(user)
    db.refresh(user)
    logger.info("user_registered", user_id=user.id)
    return user


def authenticate(db: Session, payload: UserLogin) -> User:
    if not payload.email or not payload.password:
        raise ValidationError("Email and password are required")
    user = db.scalars(select(User).where(User.email == payload.email)).first()
    if user is None or not verify_password(payload.password, user.password):
        logger.info("login_rejected")
        raise Unauthorized("Invalid credentials")
    if needs_rehash(user.password):
        with write_lock(RESOURCE), committing(db):
            user.password = hash_password(payload.password)
        logger.info("user_password_rehashed", user_id=user.id)
    return user


def change_password(db: Session, user_id: int, payload: PasswordChange) -> None:
    if not payload.current_password or not payload.new_password:
        raise ValidationError("Current and new password are required")
    with write_lock(RESOURCE), committing(db):
        user = get_user(db, user_id)
        if not verify_password(payload.current_password, user.password):
            raise Unauthorized("Current password is incorrect")
        user.password = hash_password(payload.new_password)
        user.updated_at = utc_now()
    logger.info("user_password_changed", user_id=user_id)
