# yadokari/config.py
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_LISTING_SOURCE_URL = "https://chintai.sumai.ur-net.go.jp/chintai/api/bukken/search/list_bukken/"
DEFAULT_SLACK_POST_MESSAGE_URL = "https://slack.com/api/chat.postMessage"


@dataclass(frozen=True)
class AppConfig:
    """Process-wide settings, built once at startup and never mutated."""
    verification_token: str
    bot_token: str
    bot_user: str
    region_code: str
    database_url: str
    listing_source_url: str = DEFAULT_LISTING_SOURCE_URL
    slack_post_message_url: str = DEFAULT_SLACK_POST_MESSAGE_URL
    http_timeout: float = 10.0
    max_notify_listings: int = 10
    log_level: str = "INFO"
    port: int = 8000


def _require(name: str) -> str:
    value = (os.getenv(name) or "").strip()
    if not value:
        raise RuntimeError(f"{name} must be set")
    return value


def _get_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def load_config(dotenv_path: Optional[str] = None) -> AppConfig:
    load_dotenv(dotenv_path=dotenv_path)

    return AppConfig(
        verification_token=_require("VERIFICATION_TOKEN"),
        bot_token=_require("BOT_USER_OAUTH_TOKEN"),
        bot_user=_require("BOT_USER"),
        region_code=_require("TDFK"),
        database_url=_require("DATABASE_URL"),
        listing_source_url=os.getenv("LISTING_SOURCE_URL", DEFAULT_LISTING_SOURCE_URL),
        slack_post_message_url=os.getenv("SLACK_POST_MESSAGE_URL", DEFAULT_SLACK_POST_MESSAGE_URL),
        http_timeout=_get_float("HTTP_TIMEOUT_SECONDS", 10.0),
        max_notify_listings=_get_int("MAX_NOTIFY_LISTINGS", 10),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        port=_get_int("PORT", 8000),
    )
