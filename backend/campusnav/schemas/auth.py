# backend/campusnav/schemas/auth.py
from pydantic import BaseModel, Field
from typing import Literal, Optional
import datetime as dt

AdminRoleName = Literal["SUPERADMIN", "EDITOR"]


class LoginIn(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AdminOut(BaseModel):
    id: int
    username: str
    email: str
    name: Optional[str] = None
    role: AdminRoleName
    last_login_at: Optional[dt.datetime] = None


class SessionOut(BaseModel):
    token: str
    expires_at: dt.datetime
    user: AdminOut
