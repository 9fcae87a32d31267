"""Day-scoped commands over the event ledger: generate, stats, delete."""

import logging

from aiogram import Router, F
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.types import Message

from postbot.config import Config
from postbot.database import StorageUnavailable
from postbot.keyboards.main_menu import BUTTON_GENERATE, BUTTON_STATS, BUTTON_DELETE
from postbot.services.event_ledger import EventLedger
from postbot.services.summary_service import SummaryService
from postbot.utils import texts
from postbot.utils.inbound import Identity

logger = logging.getLogger(__name__)
router = Router()


async def _delete_quietly(msg: Message | None):
    if msg is None:
        return
    try:
        await msg.delete()
    except TelegramBadRequest as e:
        logger.warning("Could not delete message %s: %s", msg.message_id, e)


async def _send_long(message: Message, text: str):
    for part in texts.split_text(text):
        # Telegram rejects empty or whitespace-only messages
        if part.strip():
            await message.answer(part)


@router.message(Command("generate"))
@router.message(F.text == BUTTON_GENERATE)
async def cmd_generate(
    message: Message,
    identity: Identity,
    ledger: EventLedger,
    config: Config,
    summary_service: SummaryService | None = None,
):
    waiting = await message.answer(texts.GENERATING.format(first_name=identity.first_name))
    try:
        sticker = await message.answer_sticker(config.loading_sticker_id)
    except TelegramBadRequest as e:
        logger.warning("Loading sticker unavailable: %s", e)
        sticker = None

    try:
        events = await ledger.list_for_day(identity.id)
    except StorageUnavailable:
        logger.exception("Failed to load events for user %s", identity.id)
        await _delete_quietly(waiting)
        await _delete_quietly(sticker)
        await message.answer(texts.ERROR_GENERATE)
        return

    if not events:
        await _delete_quietly(waiting)
        await _delete_quietly(sticker)
        await message.answer(texts.NO_EVENTS)
        return

    event_texts = [e.text for e in events]
    logger.info("Generating posts for user %s from %d event(s)", identity.id, len(event_texts))
    summary = await summary_service.summarize(event_texts) if summary_service else None

    await _delete_quietly(waiting)
    await _delete_quietly(sticker)

    if summary:
        await _send_long(message, summary)
        return

    await message.answer(texts.RAW_EVENTS_HEADER)
    await _send_long(message, ", ".join(event_texts))


@router.message(Command("stats"))
@router.message(F.text == BUTTON_STATS)
async def cmd_stats(message: Message, identity: Identity, ledger: EventLedger):
    try:
        count = await ledger.count_for_day(identity.id)
    except StorageUnavailable:
        logger.exception("Failed to count events for user %s", identity.id)
        await message.answer(texts.ERROR_STATS)
        return
    await message.answer(texts.STATS.format(count=count))


@router.message(Command("deleteevents"))
@router.message(F.text == BUTTON_DELETE)
async def cmd_delete_events(message: Message, identity: Identity, ledger: EventLedger):
    try:
        count = await ledger.delete_for_day(identity.id)
    except StorageUnavailable:
        logger.exception("Failed to delete events for user %s", identity.id)
        await message.answer(texts.ERROR_DELETE)
        return
    await message.answer(texts.EVENTS_DELETED.format(count=count))
