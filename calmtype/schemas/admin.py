"""Pydantic schemas for the admin listings (timestamps pre-formatted)."""
from pydantic import BaseModel


class AdminUserSchema(BaseModel):
    id: str
    username: str
    email: str
    is_guest: bool | None = None
    created_at: str | None = None
    last_login: str | None = None


class AdminUsersOutSchema(BaseModel):
    users: list[AdminUserSchema]
    total: int
    timestamp: str
    timezone: str


class AdminGuestSchema(BaseModel):
    id: str
    created_at: str | None = None
    last_activity: str | None = None


class AdminGuestsOutSchema(BaseModel):
    guests: list[AdminGuestSchema]
    total: int
    timestamp: str
    timezone: str
