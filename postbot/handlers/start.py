import logging

from aiogram import Router
from aiogram.filters import CommandStart, Command
from aiogram.types import Message

from postbot.database import StorageUnavailable
from postbot.keyboards.main_menu import get_main_menu
from postbot.services.event_ledger import EventLedger
from postbot.services.user_directory import UserDirectory
from postbot.utils import texts
from postbot.utils.inbound import Identity

logger = logging.getLogger(__name__)
router = Router()


@router.message(CommandStart())
async def cmd_start(message: Message, identity: Identity, user_directory: UserDirectory):
    try:
        await user_directory.ensure_user(identity)
    except StorageUnavailable:
        logger.exception("Failed to register user %s", identity.id)
        await message.answer(texts.ERROR_START)
        return

    await message.answer(
        texts.WELCOME.format(first_name=identity.first_name),
        reply_markup=get_main_menu(),
    )


@router.message(Command("help"))
async def cmd_help(message: Message):
    await message.answer(texts.HELP)


@router.message(Command("about"))
async def cmd_about(message: Message):
    await message.answer(texts.ABOUT)


@router.message(Command("time"))
async def cmd_time(message: Message, ledger: EventLedger):
    await message.answer(texts.SERVER_TIME.format(time=ledger.now().strftime("%H:%M:%S")))


@router.message(Command("quit"))
async def cmd_quit(message: Message, identity: Identity):
    # Reply only; polling keeps running for everyone else
    logger.info("User %s sent /quit", identity.id)
    await message.answer(texts.QUIT)
