import logging

from aiogram import Router, F
from aiogram.types import Message

from postbot.database import StorageUnavailable
from postbot.services.event_ledger import EventLedger
from postbot.utils import texts
from postbot.utils.inbound import Command, Identity, PlainText, classify, smalltalk_reply

logger = logging.getLogger(__name__)
router = Router()


@router.message(F.text)
async def handle_text(message: Message, identity: Identity, ledger: EventLedger):
    inbound = classify(message.text)

    if isinstance(inbound, Command):
        # Known commands are routed earlier; anything reaching here is unknown
        await message.answer(texts.UNKNOWN_COMMAND.format(name=inbound.name))
        return

    if not isinstance(inbound, PlainText):
        return

    reply = smalltalk_reply(inbound.body, identity.first_name)
    if reply is not None:
        await message.answer(reply)
        return

    try:
        await ledger.record(identity.id, inbound.body)
    except StorageUnavailable:
        logger.exception("Failed to record event for user %s", identity.id)
        await message.answer(texts.ERROR_RECORD)
        return
    await message.answer(texts.EVENT_ADDED)
