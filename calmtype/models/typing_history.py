"""Typing history: one committed sentence, owned by a user or a guest."""
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from calmtype.db.session import Base


class TypingHistory(Base):
    __tablename__ = "typing_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # exactly one of user_id / guest_id is set
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    guest_id = Column(String(36), ForeignKey("guest_sessions.id"), nullable=True, index=True)
    text = Column(Text, nullable=False)
    word_count = Column(Integer, nullable=True)
    wpm = Column(Integer, nullable=True)
    accuracy = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
