"""Orchestrator configuration via pydantic-settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from crush_orchestrator.core.types import DEFAULT_STRATEGY, StrategyName


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="CRUSH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # External binary
    binary_path: str = "crush"
    invocation_timeout_seconds: float | None = Field(default=300.0, gt=0)

    # Strategy configuration
    default_strategy: StrategyName = DEFAULT_STRATEGY
    cost_optimized_default_budget: float = Field(default=0.01, ge=0.0)
    quality_max_iterations: int = Field(default=3, ge=1)
    quality_threshold: float = Field(default=0.75, ge=0.0, le=1.0)
    quality_legacy_structure_signals: bool = False

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # API configuration
    api_title: str = "Crush Orchestrator API"
