from calmtype.schemas.admin import AdminGuestsOutSchema, AdminUsersOutSchema
from calmtype.schemas.auth import AuthOutSchema, GuestOutSchema, LoginSchema, RegisterSchema
from calmtype.schemas.common import DataOutSchema, MessageSchema
from calmtype.schemas.correction import CorrectionInSchema, CorrectionOutSchema
from calmtype.schemas.history import HistoryInSchema, HistoryOutSchema, HistorySavedSchema
from calmtype.schemas.passage import PassageInSchema, PassageListSchema, PassageSavedSchema, PassageSchema

__all__ = [
    "AdminGuestsOutSchema",
    "AdminUsersOutSchema",
    "AuthOutSchema",
    "GuestOutSchema",
    "LoginSchema",
    "RegisterSchema",
    "DataOutSchema",
    "MessageSchema",
    "CorrectionInSchema",
    "CorrectionOutSchema",
    "HistoryInSchema",
    "HistoryOutSchema",
    "HistorySavedSchema",
    "PassageInSchema",
    "PassageListSchema",
    "PassageSavedSchema",
    "PassageSchema",
]
