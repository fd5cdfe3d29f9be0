from calmtype.models.user import User
from calmtype.models.guest_session import GuestSession
from calmtype.models.typing_history import TypingHistory
from calmtype.models.user_data import UserData
from calmtype.models.user_settings import UserSettings
from calmtype.models.passage import Passage

__all__ = ["User", "GuestSession", "TypingHistory", "UserData", "UserSettings", "Passage"]
