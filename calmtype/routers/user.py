"""Routes for registered users (bearer token gate)."""
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from calmtype.core.security import TokenClaims
from calmtype.routers.deps import Db, require_user, user_owner
from calmtype.routers.owned import build_owned_router
from calmtype.schemas.common import DataOutSchema, MessageSchema
from calmtype.services import user_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["user"])
CurrentUser = Annotated[TokenClaims, Depends(require_user)]


@router.get("/data/{data_type}", response_model=DataOutSchema)
async def get_user_data(data_type: str, claims: CurrentUser, db: Db):
    try:
        data = await user_data.get_user_data(db, claims.user_id, data_type)
    except SQLAlchemyError:
        logger.exception("User data retrieval error")
        raise HTTPException(status_code=500, detail="Database error")
    return DataOutSchema(data=data)


@router.post("/data/{data_type}", response_model=MessageSchema)
async def save_user_data(data_type: str, payload: Annotated[Any, Body()], claims: CurrentUser, db: Db):
    """Upsert: one row per (user, data type), latest write wins."""
    try:
        await user_data.save_user_data(db, claims.user_id, data_type, payload)
    except SQLAlchemyError:
        logger.exception("User data save error")
        raise HTTPException(status_code=500, detail="Failed to save data")
    logger.debug("Saved %s data for user %s", data_type, claims.user_id)
    return MessageSchema(message="Data saved successfully")


router.include_router(build_owned_router("", user_owner, "user"))
