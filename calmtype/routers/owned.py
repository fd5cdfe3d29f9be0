"""History, settings and passage routes, identical for users and guests.

`build_owned_router` is mounted twice: under /api/user with the token gate
and under /api/guest with the guest gate. Handlers only see an `Owner`.
"""
import logging
from typing import Annotated, Any, Callable

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from calmtype.routers.deps import Db
from calmtype.schemas.common import DataOutSchema, MessageSchema
from calmtype.schemas.history import HistoryInSchema, HistoryOutSchema, HistorySavedSchema
from calmtype.schemas.passage import (
    PassageInSchema,
    PassageListSchema,
    PassageSavedSchema,
    PassageSchema,
    PassageUpdateSchema,
)
from calmtype.services import history, owner_settings, passages
from calmtype.services.common import Owner

logger = logging.getLogger(__name__)


def build_owned_router(prefix: str, owner_dependency: Callable[..., Owner], tag: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])
    CurrentOwner = Annotated[Owner, Depends(owner_dependency)]

    # ---------- history ----------

    @router.get("/history", response_model=HistoryOutSchema)
    async def get_history(owner: CurrentOwner, db: Db):
        """Newest first, at most 100 entries."""
        try:
            rows = await history.list_entries(db, owner)
        except SQLAlchemyError:
            logger.exception("%s history retrieval error", owner.kind)
            raise HTTPException(status_code=500, detail="Database error")
        return {"history": rows}

    @router.post("/history", response_model=HistorySavedSchema)
    async def save_history(body: HistoryInSchema, owner: CurrentOwner, db: Db):
        if not body.text or not body.text.strip():
            raise HTTPException(status_code=400, detail="Text is required")
        try:
            entry_id = await history.add_entry(
                db,
                owner,
                body.text,
                timestamp=body.timestamp,
                words=body.word_count,
                wpm=body.wpm,
                accuracy=body.accuracy,
            )
        except SQLAlchemyError:
            logger.exception("%s history save error", owner.kind)
            raise HTTPException(status_code=500, detail="Failed to save history")
        return HistorySavedSchema(message="History saved successfully", id=entry_id)

    # ---------- settings ----------

    @router.get("/settings", response_model=DataOutSchema)
    async def get_settings(owner: CurrentOwner, db: Db):
        return DataOutSchema(data=await owner_settings.get_settings_blob(db, owner))

    @router.post("/settings", response_model=MessageSchema)
    async def save_settings(payload: Annotated[Any, Body()], owner: CurrentOwner, db: Db):
        try:
            await owner_settings.save_settings_blob(db, owner, payload)
        except SQLAlchemyError:
            logger.exception("%s settings save error", owner.kind)
            raise HTTPException(status_code=500, detail="Failed to save settings")
        return MessageSchema(message="Settings saved successfully")

    # ---------- passages ----------

    @router.get("/passages", response_model=PassageListSchema)
    async def list_passages(owner: CurrentOwner, db: Db):
        return PassageListSchema(passages=await passages.list_passages(db, owner))

    @router.post("/passages", response_model=PassageSavedSchema, status_code=201)
    async def create_passage(body: PassageInSchema, owner: CurrentOwner, db: Db):
        if not body.content or not body.content.strip():
            raise HTTPException(status_code=400, detail="Content is required")
        try:
            passage = await passages.create_passage(db, owner, body.title, body.content)
        except SQLAlchemyError:
            logger.exception("%s passage save error", owner.kind)
            raise HTTPException(status_code=500, detail="Failed to save passage")
        return PassageSavedSchema(message="Passage saved successfully", passage=passage)

    @router.get("/passages/{passage_id}", response_model=PassageSchema)
    async def get_passage(passage_id: int, owner: CurrentOwner, db: Db):
        passage = await passages.get_passage(db, owner, passage_id)
        if passage is None:
            raise HTTPException(status_code=404, detail="Passage not found")
        return passage

    @router.put("/passages/{passage_id}", response_model=PassageSavedSchema)
    async def update_passage(passage_id: int, body: PassageUpdateSchema, owner: CurrentOwner, db: Db):
        if body.content is not None and not body.content.strip():
            raise HTTPException(status_code=400, detail="Content cannot be empty")
        passage = await passages.update_passage(db, owner, passage_id, title=body.title, content=body.content)
        if passage is None:
            raise HTTPException(status_code=404, detail="Passage not found")
        return PassageSavedSchema(message="Passage updated successfully", passage=passage)

    @router.delete("/passages/{passage_id}", response_model=MessageSchema)
    async def delete_passage(passage_id: int, owner: CurrentOwner, db: Db):
        if not await passages.delete_passage(db, owner, passage_id):
            raise HTTPException(status_code=404, detail="Passage not found")
        return MessageSchema(message="Passage deleted successfully")

    return router
