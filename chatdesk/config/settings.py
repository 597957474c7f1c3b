"""Application configuration with environment-based settings."""
import os
import logging
from typing import Optional
from dotenv import load_dotenv


class Config:
    """Base configuration class following Single Responsibility Principle."""

    # Load environment variables
    load_dotenv()

    # Persistence Configuration
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "redis")
    STORAGE_KEY_PREFIX: str = os.getenv("STORAGE_KEY_PREFIX", "chatdesk")
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Reply generation (OpenAI / LangChain)
    AI_PROVIDER: str = os.getenv("AI_PROVIDER", "openai")
    OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    REPLY_GENERATION_TIMEOUT: float = float(os.getenv("REPLY_GENERATION_TIMEOUT", "15"))
    REPLY_MAX_TOKENS: int = int(os.getenv("REPLY_MAX_TOKENS", "100"))

    # Reply simulation
    REPLY_DELAY_MIN: float = float(os.getenv("REPLY_DELAY_MIN", "2.0"))
    REPLY_DELAY_MAX: float = float(os.getenv("REPLY_DELAY_MAX", "4.0"))
    REPLY_FALLBACK_TEXT: str = os.getenv("REPLY_FALLBACK_TEXT", "Sorry, I didn't understand.")
    REPLY_WORKERS: int = int(os.getenv("REPLY_WORKERS", "4"))

    # Tenants
    MAX_USERS_PER_COMPANY: int = int(os.getenv("MAX_USERS_PER_COMPANY", "15"))
    DEFAULT_AGENT_PASSWORD: str = os.getenv("DEFAULT_AGENT_PASSWORD", "123")

    # Rate Limiting
    RATELIMIT_STORAGE_URL: str = os.getenv("RATELIMIT_STORAGE_URL", "redis://localhost:6379/2")
    RATELIMIT_ENABLED: bool = os.getenv("RATELIMIT_ENABLED", "true").lower() == "true"

    # Monitoring
    SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN")
    ENABLE_METRICS: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

    # Application
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values that affect runtime behaviour."""
        if cls.STORAGE_BACKEND not in ("redis", "memory"):
            raise ValueError(f"Unsupported STORAGE_BACKEND: {cls.STORAGE_BACKEND}")

        if cls.REPLY_DELAY_MIN < 0 or cls.REPLY_DELAY_MAX < cls.REPLY_DELAY_MIN:
            raise ValueError(
                f"Invalid reply delay range: {cls.REPLY_DELAY_MIN}-{cls.REPLY_DELAY_MAX}"
            )

        if cls.AI_PROVIDER in ("openai", "langchain") and not cls.OPENAI_API_KEY:
            logging.getLogger(__name__).warning(
                "OPENAI_API_KEY not set - simulated replies will use the fallback text"
            )


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    STORAGE_BACKEND = "memory"
    AI_PROVIDER = "offline"
    REPLY_DELAY_MIN = 0.0
    REPLY_DELAY_MAX = 0.0
    RATELIMIT_ENABLED = False
    ENABLE_METRICS = False
    SENTRY_DSN = None
    REDIS_URL = "redis://localhost:6379/15"  # isolated db index


def get_config() -> type[Config]:
    """Factory method to get configuration based on environment."""
    env = os.getenv("FLASK_ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }

    return config_map.get(env, DevelopmentConfig)
