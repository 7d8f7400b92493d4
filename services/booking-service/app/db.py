from shared.database import Base, get_engine, get_session, create_all

from .config import BOOKING_DB, SQL_ECHO

engine = get_engine(BOOKING_DB, echo=SQL_ECHO)

SessionLocal = get_session(engine)


async def init_db():
    # models must be imported so their tables are registered on Base.metadata
    from . import models  # noqa: F401

    await create_all(engine)


async def get_db():
    async with SessionLocal() as session:
        yield session
