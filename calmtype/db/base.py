"""SQLAlchemy declarative base and model imports for Alembic."""
from calmtype.db.session import Base

# Import all models so Alembic can see them
from calmtype.models.guest_session import GuestSession  # noqa: F401
from calmtype.models.passage import Passage  # noqa: F401
from calmtype.models.typing_history import TypingHistory  # noqa: F401
from calmtype.models.user import User  # noqa: F401
from calmtype.models.user_data import UserData  # noqa: F401
from calmtype.models.user_settings import UserSettings  # noqa: F401

__all__ = ["Base", "User", "GuestSession", "TypingHistory", "UserData", "UserSettings", "Passage"]
