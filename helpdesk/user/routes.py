# helpdesk/user/routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from helpdesk.core.database import get_db
from helpdesk.core.schemas import MessageOut
from helpdesk.user import services as user_service
from helpdesk.user.schemas import (
    AuthResult,
    PasswordChange,
    UserBrief,
    UserLogin,
    UserOut,
    UserRegister,
)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/register", response_model=AuthResult, status_code=201)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    user = user_service.register_user(db, payload)
    return AuthResult(message="User created successfully", user=UserOut.model_validate(user))


@router.post("/login", response_model=AuthResult)
def login(payload: UserLogin, db: Session = Depends(get_db)):
    user = user_service.authenticate(db, payload)
    return AuthResult(message="Login successful", user=UserOut.model_validate(user))


@router.put("/{user_id}/password", response_model=MessageOut)
def update_password(user_id: int, payload: PasswordChange, db: Session = Depends(get_db)):
    user_service.change_password(db, user_id, payload)
    return MessageOut(message="Password updated successfully")


@router.get("", response_model=list[UserBrief])
def list_users(db: Session = Depends(get_db)):
    return user_service.get_all_users(db)


@router.get("/{user_id}", response_model=UserOut)
def get(user_id: int, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)
