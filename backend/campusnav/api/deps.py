# backend/campusnav/api/deps.py
import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusnav.config import get_settings
from campusnav.db import get_db
from campusnav.models import AdminUser
from campusnav.services import auth as auth_service
from campusnav.services.catalog import InvalidReference
from campusnav.services.assistant import IntentExtractor, VoiceAssistantFlow

logger = logging.getLogger(__name__)


def session_token(request: Request) -> Optional[str]:
    """Session cookie for the admin UI, Bearer token for API clients."""
    token = request.cookies.get(get_settings().session_cookie_name)
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def require_admin(request: Request, db: Session = Depends(get_db)) -> AdminUser:
    token = session_token(request)
    if not token:
        logger.info("unauthenticated request path=%s", request.url.path)
        raise HTTPException(status_code=401, detail="Unauthorized")
    user = auth_service.validate_session(db, token)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    return user


@lru_cache()
def get_intent_extractor() -> IntentExtractor:
    settings = get_settings()
    return IntentExtractor(api_key=settings.gemini_api_key, model=settings.gemini_model)


def get_assistant_flow(extractor: IntentExtractor = Depends(get_intent_extractor)) -> VoiceAssistantFlow:
    return VoiceAssistantFlow(extractor, campus_name=get_settings().campus_name)


@contextmanager
def persist(db: Session, failure: str):
    """Commit the block, turning ORM failures into a generic client-facing message."""
    try:
        yield
        db.commit()
    except InvalidReference as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        db.rollback()
        logger.exception(failure)
        raise HTTPException(status_code=400, detail=failure)
