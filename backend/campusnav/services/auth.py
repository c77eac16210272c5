# backend/campusnav/services/auth.py
"""Admin credentials (bcrypt) and opaque session tokens stored in the database."""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from sqlalchemy.orm import Session

from campusnav.models import AdminUser, AdminSession, AdminRole

logger = logging.getLogger(__name__)

# compared against when the username is unknown so both paths cost one bcrypt check
_DUMMY_HASH = bcrypt.hashpw(b"campusnav-dummy", bcrypt.gensalt(rounds=4))


def utcnow() -> datetime:
    # columns store naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash password using bcrypt"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("stored password hash is not a bcrypt hash")
        return False


def create_admin(
    db: Session,
    username: str,
    email: str,
    password: str,
    name: Optional[str] = None,
    role: AdminRole = AdminRole.EDITOR,
    rounds: int = 12,
) -> AdminUser:
    user = AdminUser(
        username=username.lower(),
        email=email,
        name=name,
        password_hash=hash_password(password, rounds),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate(db: Session, username: str, password: str) -> Optional[AdminUser]:
    user = db.query(AdminUser).filter(AdminUser.username == username.lower()).first()
    if user is None:
        bcrypt.checkpw(password.encode("utf-8"), _DUMMY_HASH)
        logger.info("login rejected: unknown user")
        return None
    if not verify_password(password, user.password_hash):
        logger.info("login rejected: bad password user_id=%s", user.id)
        return None
    user.last_login_at = utcnow()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_session(db: Session, user: AdminUser, ttl_minutes: int) -> AdminSession:
    session = AdminSession(
        token=secrets.token_urlsafe(32),
        admin_user_id=user.id,
        expires_at=utcnow() + timedelta(minutes=ttl_minutes),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info("admin session opened user_id=%s", user.id)
    return session


def validate_session(db: Session, token: str) -> Optional[AdminUser]:
    session = db.get(AdminSession, token)
    if session is None:
        return None
    if session.expires_at <= utcnow():
        db.delete(session)
        db.commit()
        return None
    return session.user


def end_session(db: Session, token: str) -> bool:
    session = db.get(AdminSession, token)
    if session is None:
        return False
    db.delete(session)
    db.commit()
    return True
