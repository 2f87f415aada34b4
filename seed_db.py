import asyncio

from sqlalchemy import select

from jokester import models  # noqa: F401
from jokester.database import Base, async_session, engine
from jokester.models.joke import Joke
from jokester.models.user import User
from jokester.services.passwords import hash_password

JOKES = [
    ("Road worker", "I never wanted to believe that my Dad was stealing from his job as a road worker. But when I got home, all the signs were there."),
    ("Frisbee", "I was wondering why the frisbee was getting bigger, then it hit me."),
    ("Trees", "Why do trees seem suspicious on sunny days? Dunno, they're just a bit shady."),
    ("Skeletons", "Why don't skeletons ride roller coasters? They don't have the stomach for it."),
    ("Hippos", "Why don't you find hippopotamuses hiding in trees? They're really good at it."),
    ("Dinner", "What did one plate say to the other plate? Dinner is on me!"),
    ("Elevator", "My first time using an elevator was an uplifting experience. The second time let me down."),
]


async def async_main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        result = await session.execute(select(User).where(User.username == "kody"))
        kody = result.scalar_one_or_none()
        if kody:
            print("Database already seeded.")
            return

        # Password: twixrox
        kody = User(username="kody", password_hash=hash_password("twixrox"))
        session.add(kody)
        await session.flush()

        session.add_all(
            [Joke(name=name, content=content, jokester_id=kody.id) for name, content in JOKES]
        )
        await session.commit()
        print(f"Seeded user {kody.username} with {len(JOKES)} jokes.")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(async_main())
