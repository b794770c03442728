# shop_service/config.py
import os
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if os.getenv("DB_HOST"):
        return (
            f"postgresql+asyncpg://{os.getenv('DB_USER')}:{os.getenv('DB_PASSWORD')}"
            f"@{os.getenv('DB_HOST')}:{os.getenv('DB_PORT', '5432')}/{os.getenv('DB_NAME')}"
        )
    return "sqlite+aiosqlite:///./zen.db"


class Settings(BaseModel):
    database_url: str = "sqlite+aiosqlite:///./zen.db"
    db_echo: bool = False

    # Empty secret means admin routes are open
    admin_secret: str = ""

    bot_token: Optional[str] = None
    admin_chat_id: Optional[str] = None
    rabbitmq_url: Optional[str] = None
    notify_queue: str = "order_events"
    notify_timeout: float = 5.0

    cors_origins: List[str] = ["*"]
    seed_demo: bool = True

    environment: str = "development"
    log_level: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment (and a .env file, if any)."""
        load_dotenv(find_dotenv(usecwd=True))
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            database_url=_database_url(),
            db_echo=_flag("DB_ECHO"),
            admin_secret=os.getenv("ADMIN_SECRET", ""),
            bot_token=os.getenv("BOT_TOKEN") or None,
            admin_chat_id=os.getenv("ADMIN_CHAT_ID") or None,
            rabbitmq_url=os.getenv("RABBITMQ_URL") or None,
            notify_queue=os.getenv("NOTIFY_QUEUE", "order_events"),
            notify_timeout=float(os.getenv("NOTIFY_TIMEOUT", "5")),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            seed_demo=_flag("SEED_DEMO", "1"),
            environment=os.getenv("ENVIRONMENT", "development").lower(),
            log_level=os.getenv("LOG_LEVEL") or None,
        )
