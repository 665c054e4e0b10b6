"""Configuration management for the feedback system."""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration."""

    # Server Configuration
    HOST = os.getenv("HOST", "127.0.0.1")
    PORT = int(os.getenv("PORT", "3000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Database Configuration
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./feedback.db")

    # Sentiment lexicon JSON (empty means AFINN-165 from the afinn package)
    LEXICON_PATH = os.getenv("LEXICON_PATH", "")

    # Analytics Configuration
    TREND_WINDOW_DAYS = int(os.getenv("TREND_WINDOW_DAYS", "7"))

    # Pagination Configuration
    DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "50"))
    MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))
    RECENT_FEEDBACK_LIMIT = int(os.getenv("RECENT_FEEDBACK_LIMIT", "12"))

    DEFAULT_RATING = 3

    # Field limits
    NAME_MAX_LENGTH = 100
    MESSAGE_MAX_LENGTH = 2000


config = Config()
