"""Small envelopes shared by several routers."""
from typing import Any

from pydantic import BaseModel


class MessageSchema(BaseModel):
    message: str


class DataOutSchema(BaseModel):
    data: Any = None
