"""Pydantic schemas for typing history."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class HistoryInSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    timestamp: datetime | None = None
    word_count: int | None = Field(default=None, alias="wordCount")
    wpm: int | None = None
    accuracy: float | None = None


class HistoryItemSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    text: str
    timestamp: datetime | None = None
    word_count: int = Field(alias="wordCount")
    wpm: int | None = None
    accuracy: float | None = None


class HistoryOutSchema(BaseModel):
    history: list[HistoryItemSchema]


class HistorySavedSchema(BaseModel):
    message: str
    id: int | None = None
