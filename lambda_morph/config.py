"""Configuration for lambda-morph, loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class MorphConfig(BaseSettings):
    model_config = {"env_prefix": "LAMBDA_MORPH_"}

    time_scale: float = Field(default=1.0, ge=0.0)
    log_level: str = "INFO"

    sample_rate: int = Field(default=22050, ge=8000)
    cue_volume: float = Field(default=1.0, ge=0.0, le=1.0)

    example_seed: int | None = None
