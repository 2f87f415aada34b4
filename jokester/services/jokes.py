"""Joke persistence — create and read jokes through the async session."""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from jokester.models.joke import Joke

logger = logging.getLogger(__name__)


async def create_joke(db: AsyncSession, name: str, content: str, jokester_id: str) -> Joke:
    """Insert a joke owned by ``jokester_id`` and return it with its generated id."""
    joke = Joke(name=name, content=content, jokester_id=jokester_id)
    db.add(joke)
    await db.flush()
    await db.refresh(joke)
    logger.info(f"Joke {joke.id} created by {jokester_id}")
    return joke


async def get_joke(db: AsyncSession, joke_id: str) -> Optional[Joke]:
    result = await db.execute(select(Joke).where(Joke.id == joke_id))
    return result.scalar_one_or_none()


async def list_recent_jokes(db: AsyncSession, limit: int = 5) -> List[Joke]:
    """Latest jokes first, for the sidebar."""
    result = await db.execute(
        select(Joke).order_by(Joke.created_at.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def get_random_joke(db: AsyncSession) -> Optional[Joke]:
    result = await db.execute(select(Joke).order_by(func.random()).limit(1))
    return result.scalar_one_or_none()


async def delete_joke(db: AsyncSession, joke: Joke) -> None:
    await db.delete(joke)
    await db.flush()
    logger.info(f"Joke {joke.id} deleted by {joke.jokester_id}")
