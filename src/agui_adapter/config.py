"""
Adapter configuration.

Values come from keyword arguments or, through ``AdapterConfig.from_env``,
from ``AGUI_*`` environment variables (a ``.env`` file is honoured).
"""

import os
from typing import Literal, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

AgentType = Literal["auto", "claude", "openclaw"]

ENV_PREFIX = "AGUI_"

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class AdapterConfig(BaseModel):
    """Settings shared by the segmenter, classifier and CLI."""

    flush_timeout_ms: int = Field(default=100, gt=0)
    agent_type: AgentType = "auto"
    flush_on_exit: bool = True
    mock_base_delay_ms: int = Field(default=800, ge=0)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def flush_timeout(self) -> float:
        """Idle flush timeout in seconds."""
        return self.flush_timeout_ms / 1000

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides) -> "AdapterConfig":
        """
        Build a config from ``AGUI_*`` environment variables.

        Explicit keyword overrides win over the environment. Pydantic
        performs the string coercion, so ``AGUI_FLUSH_ON_EXIT=false`` works.
        Without ``env_file`` the nearest ``.env`` above the working directory
        is loaded; variables already set in the environment are kept.
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))

        values = {}
        for field_name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is not None and raw != "":
                values[field_name] = raw

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
