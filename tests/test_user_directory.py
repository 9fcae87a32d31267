import asyncio

import pytest
from sqlalchemy import text

from postbot.database import StorageUnavailable
from postbot.services.user_directory import UserDirectory
from postbot.utils.inbound import Identity


def test_ensure_user_creates_on_first_contact(store):
    async def scenario():
        async with store() as sessions:
            directory = UserDirectory(sessions)
            user = await directory.ensure_user(
                Identity(id=42, first_name="Ada", last_name="Lovelace", username="ada")
            )
            assert user.telegram_id == 42
            assert user.first_name == "Ada"
            assert user.last_name == "Lovelace"
            assert user.is_bot is False
            assert user.username == "ada"
            assert user.created_at is not None

    asyncio.run(scenario())


def test_ensure_user_never_overwrites_existing_record(store):
    async def scenario():
        async with store() as sessions:
            directory = UserDirectory(sessions)
            await directory.ensure_user(Identity(id=7, first_name="Sam", username="sam"))
            again = await directory.ensure_user(
                Identity(id=7, first_name="Samantha", last_name="X", is_bot=True, username="other")
            )
            assert (again.first_name, again.last_name, again.is_bot, again.username) == (
                "Sam", None, False, "sam",
            )

            stored = await directory.get(7)
            assert stored.first_name == "Sam"
            assert stored.username == "sam"

            async with sessions() as session:
                count = await session.scalar(text("SELECT COUNT(*) FROM users"))
            assert count == 1

    asyncio.run(scenario())


def test_concurrent_first_contact_keeps_one_row(store):
    async def scenario():
        async with store() as sessions:
            directory = UserDirectory(sessions)
            users = await asyncio.gather(*(
                directory.ensure_user(Identity(id=5, first_name=f"n{i}")) for i in range(5)
            ))
            assert {u.telegram_id for u in users} == {5}
            async with sessions() as session:
                count = await session.scalar(text("SELECT COUNT(*) FROM users"))
            assert count == 1

    asyncio.run(scenario())


def test_get_unknown_user_returns_none(store):
    async def scenario():
        async with store() as sessions:
            assert await UserDirectory(sessions).get(999) is None

    asyncio.run(scenario())


def test_store_failure_raises_storage_unavailable(store):
    async def scenario():
        async with store() as sessions:
            async with sessions() as session:
                await session.execute(text("DROP TABLE users"))
                await session.commit()
            with pytest.raises(StorageUnavailable):
                await UserDirectory(sessions).ensure_user(Identity(id=1, first_name="A"))

    asyncio.run(scenario())
