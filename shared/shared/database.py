from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base


def get_engine(database_url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    return create_async_engine(database_url, echo=echo, future=True, **kwargs)


Base = declarative_base()


def get_session(engine: AsyncEngine):
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False
    )


async def create_all(engine: AsyncEngine):
    async with engine.begin() as conn:
        # creates the tables (and partial indexes) if they don't exist
        await conn.run_sync(Base.metadata.create_all)
