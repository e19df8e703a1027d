"""Configuration schema using Pydantic."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BotConfig(BaseSettings):
    """
    Dispatch core configuration.

    Values can come from the environment with the BOTPIPE_ prefix,
    e.g. BOTPIPE_BOT_NAME=my_bot.
    """
    model_config = SettingsConfigDict(env_prefix="BOTPIPE_", frozen=True)

    bot_name: str  # Name used in "/cmd@bot_name"
    filter_by_bot_name: bool = False  # Ignore commands addressed to other bots
    poll_interval: float = Field(default=1.0, gt=0)  # Seconds, passed to the transport
    queue_size: int = Field(default=1, ge=1)  # Capacity of each inbound queue
    max_concurrency: int = Field(default=0, ge=0)  # Concurrent events, 0 = unbounded

    @field_validator("bot_name")
    @classmethod
    def _bot_name_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("empty bot name")
        return value
