"""Declarative base and the request-scoped database dependency."""
from fastapi import Request
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def get_db(request: Request):
    """Return the adapter constructed at startup (see calmtype.main.lifespan)."""
    return request.app.state.db
