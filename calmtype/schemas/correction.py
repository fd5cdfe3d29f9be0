"""Pydantic schemas for word correction."""
from typing import Literal

from pydantic import BaseModel, Field


class CorrectionInSchema(BaseModel):
    word: str = Field(min_length=1, max_length=64)


class CorrectionOutSchema(BaseModel):
    original: str
    corrected: str
    source: Literal["llm", "local"]
