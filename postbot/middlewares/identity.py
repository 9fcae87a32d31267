import logging
from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware
from aiogram.types import Message, CallbackQuery, TelegramObject

from postbot.utils.inbound import Identity

logger = logging.getLogger(__name__)


class IdentityMiddleware(BaseMiddleware):
    """Expose the sender as `identity` to handlers; drop updates without one."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        user = None
        if isinstance(event, (Message, CallbackQuery)):
            user = event.from_user

        if user is None:
            logger.debug("Skipping update without a sender: %s", type(event).__name__)
            return

        data["identity"] = Identity.from_user(user)
        return await handler(event, data)
