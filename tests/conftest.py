"""Shared fixtures."""

import os

# Keep the application's own engine off the filesystem.
os.environ.setdefault("VYNTRA_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from vyntra.db import models  # noqa: F401
from vyntra.engine.node_registry import register_all_nodes
from vyntra.engine.validator import require_valid_document

from .builders import FakeCompletion, FakeRecords, branching_document, scenario_a_document

TEST_DATABASE_URL = "sqlite+aiosqlite://"


def make_engine():
    return create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture(autouse=True, scope="session")
def registered_nodes() -> None:
    register_all_nodes()


@pytest.fixture
async def session_factory():
    """In-memory database with every table created."""
    engine = make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def fake_records() -> FakeRecords:
    return FakeRecords()


@pytest.fixture
def scenario_a():
    return require_valid_document(scenario_a_document())


@pytest.fixture
def branching():
    return require_valid_document(branching_document())
