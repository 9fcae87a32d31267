import os
from dataclasses import dataclass
from datetime import tzinfo
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

from postbot.database import get_database_url
from postbot.services.summary_service import DEFAULT_SUMMARY_PROMPT

DEFAULT_LOADING_STICKER = "CAACAgUAAxkBAAMiZtLg2385UKB10wF0lkaigIwkqgkAApoEAAICLmhU_1EES77w3ao1BA"


@dataclass
class Config:
    # Telegram
    bot_token: str = ""
    use_local_api: bool = False
    local_api_url: str = "http://telegram-bot-api:8081"
    loading_sticker_id: str = DEFAULT_LOADING_STICKER

    # Storage
    database_url: str = ""

    # Day boundaries; empty = host local offset
    timezone: str = ""

    # Summarization
    openai_api_key: str = ""
    summary_enabled: bool = False
    summary_model: str = "gpt-4o-mini"
    summary_prompt: str = DEFAULT_SUMMARY_PROMPT

    # Logs
    log_dir: str = "logs"

    def tzinfo(self) -> tzinfo | None:
        """Configured zone, or None for the host zone resolved on each use."""
        if self.timezone:
            return ZoneInfo(self.timezone)
        return None

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()
        return cls(
            bot_token=os.getenv("BOT_TOKEN", ""),
            use_local_api=os.getenv("USE_LOCAL_API", "false").lower() == "true",
            local_api_url=os.getenv("LOCAL_API_URL", "http://telegram-bot-api:8081"),
            loading_sticker_id=os.getenv("LOADING_STICKER_ID", DEFAULT_LOADING_STICKER),
            database_url=get_database_url(),
            timezone=os.getenv("BOT_TIMEZONE", "").strip(),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            summary_enabled=os.getenv("SUMMARY_ENABLED", "false").lower() == "true",
            summary_model=os.getenv("SUMMARY_MODEL", "gpt-4o-mini"),
            summary_prompt=os.getenv("SUMMARY_PROMPT") or DEFAULT_SUMMARY_PROMPT,
            log_dir=os.getenv("LOG_DIR", "logs"),
        )
