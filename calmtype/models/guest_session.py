"""Guest session: anonymous identity plus a JSON blob keyed by data type."""
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from calmtype.db.session import Base


class GuestSession(Base):
    __tablename__ = "guest_sessions"

    id = Column(String(36), primary_key=True)  # uuid4, sent back as x-guest-id
    # JSON object: {data_type: value}
    data = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    last_activity = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
