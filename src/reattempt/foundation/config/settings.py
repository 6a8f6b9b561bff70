"""Environment-based configuration using pydantic-settings.

Supplies the documented defaults for retry options, the policy adapter and
logging. Every value can be overridden from the environment or a .env file.

Example:
    >>> from reattempt.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.retries
    10
    
    # Or with environment variables:
    # REATTEMPT_RETRY_RETRIES=3
    # REATTEMPT_RETRY_MIN_DELAY=0.25
    # REATTEMPT_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeFloat, NonNegativeInt, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Defaults for ``RetryOptions`` when a caller passes none."""
    
    model_config = SettingsConfigDict(
        env_prefix="REATTEMPT_RETRY_",
        extra="ignore",
    )
    
    retries: NonNegativeInt = 10
    factor: float = Field(default=2.0, ge=1.0, description="Exponential growth factor")
    min_delay: NonNegativeFloat = Field(default=1.0, description="Delay before the first retry in seconds")
    max_delay: float = Field(default=math.inf, description="Upper bound for any delay in seconds")
    randomize: bool = False
    
    @model_validator(mode="after")
    def _check_bounds(self) -> RetrySettings:
        if self.max_delay < self.min_delay:
            raise ValueError("max_delay must be >= min_delay")
        return self


class PolicySettings(BaseSettings):
    """Defaults for ``RetryPolicy`` (the method retry adapter)."""
    
    model_config = SettingsConfigDict(
        env_prefix="REATTEMPT_POLICY_",
        extra="ignore",
    )
    
    retries: NonNegativeInt = 3
    min_delay: NonNegativeFloat = Field(default=0.1, description="Delay before the first retry in seconds")
    max_delay: NonNegativeFloat = Field(default=0.5, description="Upper bound for any delay in seconds")


class LoggingSettings(BaseSettings):
    """Logging configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="REATTEMPT_LOG_",
        extra="ignore",
    )
    
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "text"] = "text"
    include_timestamps: bool = True


class ReattemptSettings(BaseSettings):
    """Root settings for reattempt.
    
    Example environment variables:
        REATTEMPT_RETRY_RETRIES=5
        REATTEMPT_POLICY_MAX_DELAY=2.0
        REATTEMPT_LOG_FORMAT=json
    """
    
    model_config = SettingsConfigDict(
        env_prefix="REATTEMPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )
    
    retry: RetrySettings = Field(default_factory=RetrySettings)
    policy: PolicySettings = Field(default_factory=PolicySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> ReattemptSettings:
    """Get the global settings instance (cached)."""
    return ReattemptSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).
    
    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
