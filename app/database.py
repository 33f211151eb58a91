# app/database.py
import logging
from typing import AsyncGenerator
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from app.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(settings.effective_database_url, echo=settings.SQL_ECHO)

AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
Base = declarative_base()

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


def is_stale_connection_error(exc: BaseException) -> bool:
    """
    True for the "prepared statement" class of driver errors, which show up
    when a pooled connection outlived server-side statement state
    (pgbouncer in transaction mode, server restart).
    """
    return isinstance(exc, DBAPIError) and "prepared statement" in str(exc)


async def execute_with_reconnect(db: AsyncSession, statement):
    """
    Execute `statement`, and on a stale-connection error drop the pooled
    connections and retry exactly once. Any other error propagates.
    """
    try:
        return await db.execute(statement)
    except DBAPIError as exc:
        if not is_stale_connection_error(exc):
            raise
        logger.warning("Stale database connection, reconnecting and retrying once: %s", exc)
        await db.rollback()
        await db.bind.dispose()
        return await db.execute(statement)
