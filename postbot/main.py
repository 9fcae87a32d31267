import asyncio
import logging
import logging.handlers
import os

from aiogram import Bot, Dispatcher
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.client.telegram import TelegramAPIServer
from aiogram.types import BotCommand, ErrorEvent

from postbot.config import Config
from postbot.database import StorageUnavailable, create_engine, create_session_factory, init_db
from postbot.handlers import start, events, chat
from postbot.middlewares.identity import IdentityMiddleware
from postbot.services.event_ledger import EventLedger
from postbot.services.summary_service import SummaryService
from postbot.services.user_directory import UserDirectory
from postbot.utils import texts

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(log_dir: str):
    os.makedirs(log_dir, exist_ok=True)
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, "bot.log"), maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(file_handler)


def build_dispatcher(
    config: Config,
    user_directory: UserDirectory,
    ledger: EventLedger,
    summary_service: SummaryService | None,
) -> Dispatcher:
    dp = Dispatcher()
    dp["config"] = config
    dp["user_directory"] = user_directory
    dp["ledger"] = ledger
    dp["summary_service"] = summary_service

    dp.message.middleware(IdentityMiddleware())

    # Routers (order matters: commands first, catch-all text last)
    dp.include_router(start.router)
    dp.include_router(events.router)
    dp.include_router(chat.router)

    @dp.errors()
    async def on_error(event: ErrorEvent):
        logger.exception("Unhandled error: %s", event.exception)
        try:
            msg = event.update.message
            if msg:
                await msg.answer(texts.ERROR_GENERIC)
        except Exception:
            logger.exception("Could not notify user about the error")
        return True

    return dp


async def main():
    config = Config.from_env()
    setup_logging(config.log_dir)

    if not config.timezone:
        logger.warning("BOT_TIMEZONE is not set, day boundaries follow the host time zone")

    proxy_url = os.getenv("HTTPS_PROXY") or os.getenv("HTTP_PROXY") or None

    # Bot setup
    if config.use_local_api:
        local_server = TelegramAPIServer.from_base(
            config.local_api_url, is_local=True
        )
        session = AiohttpSession(api=local_server)
        logger.info("Using Telegram Bot API Local Server: %s", config.local_api_url)
    else:
        session = AiohttpSession(proxy=proxy_url) if proxy_url else AiohttpSession()
        logger.info("Using Telegram Cloud API (proxy: %s)", proxy_url or "none")
    bot = Bot(token=config.bot_token, session=session)

    # Init database; unreachable store at startup is fatal
    engine = create_engine(config.database_url)
    try:
        await init_db(engine)
    except StorageUnavailable:
        logger.critical("Database is unreachable, shutting down", exc_info=True)
        await engine.dispose()
        await bot.session.close()
        raise SystemExit(1)
    logger.info("Database initialized")

    session_factory = create_session_factory(engine)
    summary_service = SummaryService(
        api_key=config.openai_api_key,
        model=config.summary_model,
        enabled=config.summary_enabled,
        system_prompt=config.summary_prompt,
    )
    if summary_service.enabled:
        logger.info("Summaries enabled (model: %s)", config.summary_model)
    else:
        logger.info("Summaries disabled, /generate lists raw events")

    dp = build_dispatcher(
        config,
        user_directory=UserDirectory(session_factory),
        ledger=EventLedger(session_factory, tz=config.tzinfo()),
        summary_service=summary_service,
    )

    # Cleanup webhook/old state
    await bot.delete_webhook(drop_pending_updates=True)

    # Register bot commands for menu button
    await bot.set_my_commands([
        BotCommand(command=name, description=desc) for name, desc in texts.COMMANDS
    ])

    logger.info("Bot starting...")
    try:
        await dp.start_polling(bot)
    finally:
        await engine.dispose()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
