"""Configuration for rbcfuse, driven by env vars and/or a .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from rbcfuse.fusion.schedule import DEFAULT_PREFIX


class FusionConfig(BaseSettings):
    """Defaults for RBC fusion runs started from the CLI."""

    model_config = {"env_prefix": "RBCFUSE_FUSION_", "env_file": ".env", "extra": "ignore"}

    # p = 0.9 reads roughly the first ten positions of each ranking
    persistence: float = Field(0.9, ge=0.0, lt=1.0, description="RBC persistence parameter p")
    schedule_prefix: int = Field(
        DEFAULT_PREFIX, ge=1, description="Rank weights precomputed before lazy extension"
    )
    top_n: int | None = Field(None, ge=1, description="Truncate fused output to this many items")


class RbcfuseConfig(BaseSettings):
    """Top-level rbcfuse configuration."""

    model_config = {"env_prefix": "RBCFUSE_", "env_file": ".env", "extra": "ignore"}

    log_level: str = Field("WARNING", description="Logging level")
    log_json: bool = Field(False, description="Emit JSON-formatted logs")

    fusion: FusionConfig = Field(default_factory=FusionConfig)


def load_config(**overrides) -> RbcfuseConfig:
    """Create a config instance, applying any programmatic overrides."""
    return RbcfuseConfig(**overrides)
