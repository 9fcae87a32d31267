"""User directory: register a chat identity on first contact."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from postbot.database import open_session
from postbot.models.user import User
from postbot.utils.inbound import Identity

logger = logging.getLogger(__name__)


class UserDirectory:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def ensure_user(self, identity: Identity) -> User:
        """Insert the user if absent, otherwise return the stored row untouched."""
        async with open_session(self._session_factory) as session:
            user = await session.get(User, identity.id)
            if user is not None:
                return user

            user = User(
                telegram_id=identity.id,
                first_name=identity.first_name,
                last_name=identity.last_name,
                is_bot=identity.is_bot,
                username=identity.username,
            )
            session.add(user)
            try:
                await session.commit()
            except IntegrityError:
                # Lost a first-contact race; the other insert wins
                await session.rollback()
                user = await session.get(User, identity.id)
                if user is None:
                    raise
                return user
            await session.refresh(user)

            logger.info("New user registered: %s (@%s)", identity.id, identity.username)
            return user

    async def get(self, telegram_id: int) -> User | None:
        async with open_session(self._session_factory) as session:
            return await session.get(User, telegram_id)
