"""
Shared test fixtures.
"""

import logging

import pytest
import pytest_asyncio
from demo_db import DemoDb, create_demo_engine, populate, seed
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from ormadmin.config import AdminOptionsBuilder
from ormadmin.core.context import Principal, RequestContext
from ormadmin.policy import PolicyRegistry
from ormadmin.query import QueryComposer, RecordIntrospector


@pytest.fixture
def engine():
    """In-memory SQLite engine with the demo schema."""
    engine = create_demo_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def empty_session(engine):
    """Session on an empty demo database."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def session(engine):
    """Session on a seeded demo database."""
    with Session(engine) as session:
        seed(session)
        yield session


@pytest_asyncio.fixture
async def async_session():
    """Async session on a seeded demo database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(DemoDb.metadata.create_all)
    async with AsyncSession(engine) as session:
        await session.run_sync(populate)
        await session.commit()
        yield session
    await engine.dispose()


@pytest.fixture
def introspector():
    return RecordIntrospector()


@pytest.fixture
def composer(introspector):
    return QueryComposer(introspector)


@pytest.fixture
def principal():
    return Principal(user_id="user-1", roles=("viewer",))


@pytest.fixture
def admin_principal():
    return Principal(user_id="admin-1", roles=("admin",))


@pytest.fixture
def ctx(session, principal):
    return RequestContext(principal=principal, db=session)


@pytest.fixture
def admin_ctx(session, admin_principal):
    return RequestContext(principal=admin_principal, db=session)


@pytest.fixture
def policies():
    return PolicyRegistry()


@pytest.fixture
def options_builder(policies, introspector):
    return AdminOptionsBuilder([DemoDb], policies, introspector)


@pytest.fixture
def caplog_ormadmin(caplog):
    """caplog capturing the ormadmin logger tree at DEBUG."""
    caplog.set_level(logging.DEBUG, logger="ormadmin")
    return caplog
