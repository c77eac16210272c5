# backend/campusnav/models/admin_user.py
import enum

from sqlalchemy import Integer, String, Column, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship

from .base import Base


class AdminRole(str, enum.Enum):
    SUPERADMIN = "SUPERADMIN"
    EDITOR = "EDITOR"


class AdminUser(Base):
    __tablename__ = "admin_users"
    id = Column(Integer, primary_key=True)
    username = Column(String, nullable=False, unique=True)  # lower-case
    email = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=True)
    password_hash = Column(String, nullable=False)  # bcrypt
    role = Column(Enum(AdminRole), nullable=False, default=AdminRole.EDITOR)
    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    sessions = relationship("AdminSession", back_populates="user", passive_deletes=True)


class AdminSession(Base):
    __tablename__ = "admin_sessions"
    token = Column(String, primary_key=True)
    admin_user_id = Column(Integer, ForeignKey("admin_users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("AdminUser", back_populates="sessions")
