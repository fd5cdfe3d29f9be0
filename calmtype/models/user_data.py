"""Per-user JSON blobs keyed by data type (one row per user + type)."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.sql import func

from calmtype.db.session import Base

USER_DATA_UNIQUE = "user_data_user_id_data_type_key"


class UserData(Base):
    __tablename__ = "user_data"
    __table_args__ = (UniqueConstraint("user_id", "data_type", name=USER_DATA_UNIQUE),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    data_type = Column(String(255), nullable=False)
    data_content = Column(Text, nullable=False)  # JSON string
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
