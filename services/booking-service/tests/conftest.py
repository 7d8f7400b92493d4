import os
from types import SimpleNamespace

# the service reads its configuration at import time
os.environ["BOOKING_DB"] = "sqlite+aiosqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.pop("REDIS_URL", None)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import event
from sqlalchemy.pool import StaticPool

from shared.database import create_all, get_engine, get_session
from app.config import JWT_ALGORITHM, JWT_SECRET
from app.db import get_db
from app.main import app
from app.models import FacultyMentor, User
from app.security import Actor


@pytest.fixture
def actors():
    return SimpleNamespace(
        student=Actor(user_id=1, email="alice@campus.edu", roles=("student",)),
        other_student=Actor(user_id=2, email="bob@campus.edu", roles=("student",)),
        faculty=Actor(user_id=3, email="arun@campus.edu", roles=("faculty",)),
        admin=Actor(user_id=4, email="admin@campus.edu", roles=("admin",)),
        other_faculty=Actor(user_id=5, email="meera@campus.edu", roles=("faculty",)),
        faculty_without_profile=Actor(user_id=6, email="ravi@campus.edu", roles=("faculty",)),
        # valid token, but no row in the local users table
        unregistered=Actor(user_id=42, email="new@campus.edu", roles=("student",)),
    )


@pytest_asyncio.fixture
async def engine():
    engine = get_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # enforce foreign keys the way PostgreSQL does
    @event.listens_for(engine.sync_engine, "connect")
    def _sqlite_pragmas(dbapi_conn, _):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine, actors):
    factory = get_session(engine)

    async with factory() as db:
        for actor, name in [
            (actors.student, "Alice Rao"),
            (actors.other_student, "Bob Iyer"),
            (actors.faculty, "Arun Avinash"),
            (actors.admin, "Portal Admin"),
            (actors.other_faculty, "Meera Nair"),
            (actors.faculty_without_profile, "Ravi Kumar"),
        ]:
            db.add(User(id=actor.user_id, email=actor.email, full_name=name, role=actor.roles[0]))

        db.add_all([
            FacultyMentor(
                id=1,
                name="Arun Avinash",
                department="Computer Science",
                email="arun@campus.edu",
                office="Block A, Room 203",
                specialization="Software Engineering",
                availability=[{"day": "Monday", "slots": ["09:00-10:00", "14:00-15:00"]}],
            ),
            FacultyMentor(
                id=2,
                name="Meera Nair",
                department="Mathematics",
                email="meera@campus.edu",
                office="Block C, Room 110",
                specialization="Statistics",
                availability=[],
            ),
        ])
        await db.commit()

    return factory


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _token(actor: Actor) -> str:
    return jwt.encode(
        {"sub": str(actor.user_id), "email": actor.email, "roles": list(actor.roles)},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )


@pytest.fixture
def auth():
    def headers(actor: Actor) -> dict:
        return {"Authorization": f"Bearer {_token(actor)}"}

    return headers
