"""Configuration for position intent construction."""

from __future__ import annotations

from decimal import Context, Inexact, InvalidOperation, Overflow
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from position_intent.policies import UpdatePolicy


class IntentSettings(BaseSettings):
    """Defaults applied when building and merging position intents.

    Uses Pydantic v2 settings with environment variable support
    (``POSITION_INTENT_`` prefix, optional ``.env`` file).
    """

    model_config = SettingsConfigDict(
        env_prefix="POSITION_INTENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_update_policy: UpdatePolicy = Field(
        default=UpdatePolicy.UPDATE,
        description="Update policy a new builder starts with",
    )
    decimal_precision: int = Field(
        default=28,
        ge=1,
        le=999,
        description="Significant digits allowed in the exact sum of a merge",
    )

    def decimal_context(self) -> Context:
        """Create a decimal context that raises instead of rounding.

        A fresh context is returned on every call so concurrent merges never
        share signal flags.
        """
        return Context(
            prec=self.decimal_precision,
            traps=[Inexact, InvalidOperation, Overflow],
        )


def load_settings() -> IntentSettings:
    """Load settings from environment and .env file."""
    return IntentSettings()


@lru_cache(maxsize=1)
def get_settings() -> IntentSettings:
    """Return the process-wide default settings, loaded once on first use."""
    return load_settings()
