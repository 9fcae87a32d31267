import asyncio
from datetime import timedelta, timezone
from unittest.mock import AsyncMock

from aiogram import Bot
from aiogram.client.session.base import BaseSession
from aiogram.methods import SendMessage
from aiogram.types import Message, Update

from postbot.config import Config
from postbot.keyboards.main_menu import BUTTON_STATS
from postbot.main import build_dispatcher
from postbot.middlewares.identity import IdentityMiddleware
from postbot.services.event_ledger import EventLedger
from postbot.services.user_directory import UserDirectory
from postbot.utils import texts
from postbot.utils.inbound import Identity

TZ = timezone(timedelta(hours=3))
ADA_ID = 42


class RecordingSession(BaseSession):
    """Bot session that answers every request locally and keeps what was sent."""

    def __init__(self):
        super().__init__()
        self.requests = []

    async def make_request(self, bot, method, timeout=None):
        self.requests.append(method)
        if isinstance(method, SendMessage):
            return Message.model_validate(
                {
                    "message_id": len(self.requests) + 100,
                    "date": 1760700000,
                    "chat": {"id": method.chat_id, "type": "private"},
                    "text": method.text,
                },
                context={"bot": bot},
            )
        return True

    async def stream_content(self, url, headers=None, timeout=30, chunk_size=65536, raise_for_status=True):
        yield b""

    async def close(self):
        pass

    def sent_texts(self) -> list[str]:
        return [m.text for m in self.requests if isinstance(m, SendMessage)]


def _message_payload(text: str, with_sender: bool = True) -> dict:
    payload = {
        "message_id": 1,
        "date": 1760700000,
        "chat": {"id": ADA_ID, "type": "private"},
        "text": text,
    }
    if with_sender:
        payload["from"] = {"id": ADA_ID, "is_bot": False, "first_name": "Ada", "username": "ada"}
    return payload


def make_update(bot: Bot, update_id: int, text: str) -> Update:
    return Update.model_validate(
        {"update_id": update_id, "message": _message_payload(text)},
        context={"bot": bot},
    )


def test_identity_middleware_drops_message_without_sender():
    handler = AsyncMock()
    message = Message.model_validate(_message_payload("Gym", with_sender=False))
    data = {}
    asyncio.run(IdentityMiddleware()(handler, message, data))
    handler.assert_not_awaited()
    assert "identity" not in data


def test_identity_middleware_passes_sender_as_identity():
    handler = AsyncMock(return_value="handled")
    message = Message.model_validate(_message_payload("Gym"))
    data = {}
    result = asyncio.run(IdentityMiddleware()(handler, message, data))
    assert result == "handled"
    handler.assert_awaited_once_with(message, data)
    assert data["identity"] == Identity(id=ADA_ID, first_name="Ada", username="ada")


def test_commands_and_buttons_are_routed_before_catch_all(store, clock):
    async def scenario():
        async with store() as sessions:
            ledger = EventLedger(sessions, tz=TZ, clock=clock)
            await ledger.record(ADA_ID, "Gym")
            session = RecordingSession()
            bot = Bot(token="42:TEST", session=session)
            dp = build_dispatcher(
                Config(),
                user_directory=UserDirectory(sessions),
                ledger=ledger,
                summary_service=None,
            )

            await dp.feed_update(bot, make_update(bot, 1, "/stats"))
            await dp.feed_update(bot, make_update(bot, 2, BUTTON_STATS))
            assert await ledger.count_for_day(ADA_ID) == 1
            assert session.sent_texts() == [texts.STATS.format(count=1)] * 2

            await dp.feed_update(bot, make_update(bot, 3, "Lunch with client"))
            assert await ledger.count_for_day(ADA_ID) == 2
            assert session.sent_texts()[-1] == texts.EVENT_ADDED

    asyncio.run(scenario())
