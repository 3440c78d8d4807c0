"""
Application configuration for signal-relay.

Centralizes environment variables using python-dotenv.
"""

import os

from dotenv import load_dotenv

# Load variables from .env (if present)
load_dotenv()


class Settings:
    """
    Configuration settings for the signal-relay service.
    """

    # Telegram bots (one per role)
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_BOT_TOKEN_2: str = os.getenv("TELEGRAM_BOT_TOKEN_2", "")
    TELEGRAM_BOT_TOKEN_REAL: str = os.getenv("TELEGRAM_BOT_TOKEN_REAL", "")

    # Destination channels
    TELEGRAM_CHANNEL_ID: str = os.getenv("TELEGRAM_CHANNEL_ID", "")
    TELEGRAM_CHANNEL_PROMOTION: str = os.getenv("TELEGRAM_CHANNEL_PROMOTION", "")
    TELEGRAM_CHANNEL_ID_REAL: str = os.getenv("TELEGRAM_CHANNEL_ID_REAL", "")

    # Bot API transport
    TELEGRAM_API_BASE_URL: str = os.getenv(
        "TELEGRAM_API_BASE_URL", "https://api.telegram.org"
    )
    TELEGRAM_TIMEOUT_SEC: float = float(os.getenv("TELEGRAM_TIMEOUT_SEC", "10"))
    # How many sent messages each bot remembers for symbol lookups
    TELEGRAM_HISTORY_DEPTH: int = int(os.getenv("TELEGRAM_HISTORY_DEPTH", "200"))

    # Message policy
    SIGNAL_MENTION: str = os.getenv("SIGNAL_MENTION", "@AI_tradesbot")
    REAL_SIGNAL_MENTION: str = os.getenv(
        "REAL_SIGNAL_MENTION", os.getenv("SIGNAL_MENTION", "@AI_tradesbot")
    )
    PROMOTION_LINK: str = os.getenv("PROMOTION_LINK", "https://ai-trade.io/sign-up")

    # HTTP server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    # Log / app
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    APP_NAME: str = os.getenv("APP_NAME", "signal-relay")


settings = Settings()
