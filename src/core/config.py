"""Runtime settings, read from environment variables prefixed with CHESS_ (or a .env file)."""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.shared_types import PromotionPolicy, Side


class Settings(BaseSettings):
    database_url: str = "sqlite:///./chess.db"
    database_echo: bool = False

    # After a human move, should the response tell the caller to request an automated reply?
    auto_reply: bool = True
    opponent_side: Side = Side.BLACK
    promotion_policy: PromotionPolicy = PromotionPolicy.AUTO_QUEEN

    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_prefix="CHESS_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Set up the root logger once at process start (the web layer calls this)."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
