# helpdesk/user/schemas.py
from datetime import datetime

from helpdesk.core.schemas import CamelIn, CamelOut


class UserRegister(CamelIn):
    username: str | None = None
    email: str | None = None
    password: str | None = None
    full_name: str | None = None


class UserLogin(CamelIn):
    email: str | None = None
    password: str | None = None


class PasswordChange(CamelIn):
    current_password: str | None = None
    new_password: str | None = None


class UserOut(CamelOut):
    id: int
    username: str
    email: str
    full_name: str
    created_at: datetime
    updated_at: datetime | None = None


class UserBrief(CamelOut):
    id: int
    username: str


class AuthResult(CamelOut):
    message: str
    user: UserOut
