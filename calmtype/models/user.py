"""User model: registered accounts (guests live in guest_sessions)."""
from sqlalchemy import Boolean, Column, DateTime, String, false
from sqlalchemy.sql import func

from calmtype.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)  # uuid4
    username = Column(String(255), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    is_guest = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
