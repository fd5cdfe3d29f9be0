"""Pydantic schemas for registration, login and guest sessions."""
from pydantic import BaseModel, ConfigDict, Field


class RegisterSchema(BaseModel):
    # optional so missing fields produce our own 400 instead of a 422
    username: str | None = None
    email: str | None = None
    password: str | None = None


class LoginSchema(BaseModel):
    username: str | None = None  # username or email
    password: str | None = None


class UserOutSchema(BaseModel):
    id: str
    username: str
    email: str


class AuthOutSchema(BaseModel):
    message: str
    token: str
    user: UserOutSchema


class GuestOutSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    guest_id: str = Field(alias="guestId")
    expires_in: str = Field(alias="expiresIn")


class MeOutSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    username: str
    email: str
