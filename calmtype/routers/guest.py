"""Routes for guest sessions (x-guest-id gate)."""
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from calmtype.routers.deps import Db, guest_owner, require_guest
from calmtype.routers.owned import build_owned_router
from calmtype.schemas.common import DataOutSchema, MessageSchema
from calmtype.services import guests

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/guest", tags=["guest"])
CurrentGuest = Annotated[str, Depends(require_guest)]


@router.get("/data/{data_type}", response_model=DataOutSchema)
async def get_guest_data(data_type: str, guest_id: CurrentGuest, db: Db):
    try:
        data = await guests.get_guest_data(db, guest_id, data_type)
    except SQLAlchemyError:
        logger.exception("Guest data retrieval error")
        raise HTTPException(status_code=500, detail="Database error")
    return DataOutSchema(data=data)


@router.post("/data/{data_type}", response_model=MessageSchema)
async def save_guest_data(data_type: str, payload: Annotated[Any, Body()], guest_id: CurrentGuest, db: Db):
    try:
        await guests.save_guest_data(db, guest_id, data_type, payload)
    except SQLAlchemyError:
        logger.exception("Guest data save error")
        raise HTTPException(status_code=500, detail="Failed to save guest data")
    return MessageSchema(message="Guest data saved successfully")


router.include_router(build_owned_router("", guest_owner, "guest"))
