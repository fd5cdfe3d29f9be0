"""Pydantic schemas for passages."""
from datetime import datetime

from pydantic import BaseModel, Field


class PassageInSchema(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    content: str | None = None


class PassageUpdateSchema(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    content: str | None = None


class PassageSchema(BaseModel):
    id: int
    title: str
    content: str
    word_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PassageListSchema(BaseModel):
    passages: list[PassageSchema]


class PassageSavedSchema(BaseModel):
    message: str
    passage: PassageSchema
