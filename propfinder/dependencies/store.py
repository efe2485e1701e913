from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from propfinder.database import get_session
from propfinder.services.property_store import PropertyStore


async def get_property_store(db: AsyncSession = Depends(get_session)) -> PropertyStore:
    return PropertyStore(db)
