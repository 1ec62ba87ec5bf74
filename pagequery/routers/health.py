import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError
from sqlmodel.ext.asyncio.session import AsyncSession

from pagequery.collections import get_collection, registered_collections
from pagequery.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    """Report whether every registered collection's table can be read."""
    collections = registered_collections()
    try:
        for name in collections:
            await session.execute(select(get_collection(name)).limit(1))
    except DBAPIError:
        # Store diagnostics go to the log only
        logger.exception("Health check failed")
        return {
            "status": "unhealthy",
            "database": "disconnected",
        }
    return {
        "status": "healthy",
        "database": "connected",
        "collections": collections,
    }
