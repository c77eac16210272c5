from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from campusnav.api.deps import require_admin, session_token
from campusnav.config import get_settings
from campusnav.db import get_db
from campusnav.models import AdminUser
from campusnav.schemas.auth import LoginIn, SessionOut, AdminOut
from campusnav.services import auth as auth_service

router = APIRouter()


def _admin_out(u: AdminUser) -> AdminOut:
    return AdminOut(
        id=u.id,
        username=u.username,
        email=u.email,
        name=u.name,
        role=getattr(u.role, "value", u.role),
        last_login_at=u.last_login_at,
    )


@router.post("/login")
def login(payload: LoginIn, response: Response, db: Session = Depends(get_db)) -> SessionOut:
    settings = get_settings()
    user = auth_service.authenticate(db, payload.username, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    session = auth_service.create_session(db, user, settings.session_ttl_minutes)
    response.set_cookie(
        settings.session_cookie_name,
        session.token,
        max_age=settings.session_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
    )
    return SessionOut(token=session.token, expires_at=session.expires_at, user=_admin_out(user))


@router.post("/logout")
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    token = session_token(request)
    ended = auth_service.end_session(db, token) if token else False
    response.delete_cookie(get_settings().session_cookie_name)
    return {"ok": True, "ended": ended}


@router.get("/me")
def me(user: AdminUser = Depends(require_admin)) -> AdminOut:
    return _admin_out(user)
