"""Database engine settings."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from jokester.database import async_session, engine
from jokester.models.joke import Joke


async def _insert_orphan_joke():
    try:
        async with async_session() as session:
            session.add(Joke(name="Orphan", content="A joke nobody wrote at all.", jokester_id="ghost"))
            await session.flush()
    finally:
        await engine.dispose()


def test_joke_needs_an_existing_jokester(app):
    # Startup creates the tables; shutdown releases the pool for this loop.
    with TestClient(app):
        pass
    with pytest.raises(IntegrityError):
        asyncio.run(_insert_orphan_joke())
