from functools import lru_cache
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from vetcare.core.config import settings

@lru_cache
def get_engine():
    return create_async_engine(settings.DATABASE_URL, echo=False, future=True, pool_pre_ping=True)

@lru_cache
def get_session_factory() -> async_sessionmaker:
    return async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)
