"""
Application Configuration
"""
from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings
from pydantic import model_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "BookBot"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Bot identity
    BOT_ID: str = "bookbot"
    WELCOME_MESSAGE: str = "Hello and welcome! What is your name?"

    # State store
    REDIS_URL: str = "redis://localhost:6379/0"
    USER_STATE_TTL_HOURS: int = 720
    CONVERSATION_STATE_TTL_HOURS: int = 24

    # Book catalog
    BOOK_SEARCH_URL: str = "https://www.googleapis.com/books/v1/volumes"
    BOOK_SEARCH_API_KEY: str = ""

    # Order confirmation mail service
    MAIL_SERVICE_URL: str = "https://hc-mailing-to-customer.herokuapp.com/email"

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 10.0
    HTTP_MAX_RETRIES: int = 2
    HTTP_RETRY_DELAY_SECONDS: float = 0.5

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Reject unusable HTTP settings and flag risky production setups."""
        if self.HTTP_TIMEOUT_SECONDS <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be greater than zero.")
        if self.HTTP_MAX_RETRIES < 0:
            raise ValueError("HTTP_MAX_RETRIES can not be negative.")

        if self.APP_ENV != "development" and self.DEBUG:
            import warnings
            warnings.warn(
                "DEBUG mode is enabled in a non-development environment. "
                "This is not recommended for production.",
                UserWarning,
            )

        return self

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


settings = get_settings()
