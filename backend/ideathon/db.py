from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool
from ideathon.config import settings

class Base(DeclarativeBase):
    pass

def make_engine(**kw) -> AsyncEngine:
    return create_async_engine(settings.database_url, pool_pre_ping=True, echo=settings.sql_echo, **kw)

engine = make_engine(pool_size=settings.db_pool_size)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    # Leaving the block rolls back anything uncommitted, including cancelled requests.
    async with SessionLocal() as session:
        yield session

@asynccontextmanager
async def job_session() -> AsyncIterator[AsyncSession]:
    """
    Session for RQ jobs. Each job runs in its own event loop (asyncio.run),
    and asyncpg connections are bound to the loop that opened them, so jobs
    get an unpooled engine that is disposed with the session.
    """
    job_engine = make_engine(poolclass=NullPool)
    try:
        async with async_sessionmaker(job_engine, expire_on_commit=False)() as session:
            yield session
    finally:
        await job_engine.dispose()
