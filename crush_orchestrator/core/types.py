"""Core types for the orchestration engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StrategyName(str, Enum):
    """Names of the built-in execution strategies."""

    FAST = "fast"
    BALANCED = "balanced"
    QUALITY = "quality"
    COST_OPTIMIZED = "cost-optimized"


DEFAULT_STRATEGY = StrategyName.BALANCED

# Models used by the built-in strategies
FAST_MODEL = "grok-3-mini"
REFINE_MODEL = "claude-haiku-4-5"
DETAIL_MODEL = "claude-sonnet-4-5"

# Label recorded when a call is made without an explicit model
UNSPECIFIED_MODEL = "default"

# Rough approximation used for both token counting and output ceilings
CHARS_PER_TOKEN = 4

DEFAULT_BUDGET = 0.01


class ExecuteRequest(BaseModel):
    """A request to run a prompt through one strategy."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="Task description to execute")
    strategy: str = Field(
        default=DEFAULT_STRATEGY.value,
        description="Registered strategy name (fast, balanced, quality, cost-optimized)",
    )
    max_cost: float | None = Field(default=None, ge=0.0, description="Budget ceiling in USD")
    context: str | None = Field(default=None, description="Prior-turn text prepended to the prompt")
    session: str | None = Field(default=None, description="Session token passed to every call")

    def full_prompt(self) -> str:
        """Prompt with any context prepended."""
        if self.context:
            return f"{self.context}\n\n{self.prompt}"
        return self.prompt


class ModelResult(BaseModel):
    """Outcome of one model invocation."""

    model_config = ConfigDict(frozen=True)

    model: str
    output: str
    tokens_in: int = Field(default=0, ge=0)
    tokens_out: int = Field(default=0, ge=0)
    cost: float = Field(default=0.0, ge=0.0)
    time_seconds: float = Field(default=0.0, ge=0.0)


class ExecuteMetadata(BaseModel):
    """Cost, quality and timing accounting for one execution."""

    models_used: list[str] = Field(..., min_length=1, description="Models in call order")
    total_cost: float = Field(default=0.0, ge=0.0)
    execution_time_seconds: float = Field(default=0.0, ge=0.0)
    quality_score: float = Field(default=0.0, ge=0.0, le=1.0)
    strategy: str
    iterations: int = Field(default=1, ge=1)


class ExecuteResult(BaseModel):
    """Final answer of an execution plus its metadata."""

    result: str
    metadata: ExecuteMetadata

    @classmethod
    def from_calls(
        cls,
        result: str,
        calls: list[ModelResult],
        quality_score: float,
        strategy: str,
        iterations: int,
    ) -> ExecuteResult:
        """Build a result whose totals are the sums over ``calls``."""
        return cls(
            result=result,
            metadata=ExecuteMetadata(
                models_used=[call.model for call in calls],
                total_cost=sum(call.cost for call in calls),
                execution_time_seconds=sum(call.time_seconds for call in calls),
                quality_score=quality_score,
                strategy=strategy,
                iterations=iterations,
            ),
        )


class CostEstimate(BaseModel):
    """Projected cost, time and quality for a strategy."""

    estimated_cost: float = Field(ge=0.0)
    estimated_time_seconds: float = Field(ge=0.0)
    expected_quality: float = Field(ge=0.0, le=1.0)


@dataclass
class QualityMetrics:
    """Structural and content metrics extracted from generated text."""

    word_count: int = 0
    code_blocks: int = 0
    headers: int = 0
    lists: int = 0
    technical_terms: int = 0
    has_intro: bool = False
    has_conclusion: bool = False


# Static projections per strategy; cost-optimized echoes the caller's budget
STRATEGY_ESTIMATES: dict[StrategyName, dict[str, float]] = {
    StrategyName.FAST: {
        "estimated_cost": 0.002,
        "estimated_time_seconds": 5,
        "expected_quality": 0.6,
    },
    StrategyName.BALANCED: {
        "estimated_cost": 0.015,
        "estimated_time_seconds": 20,
        "expected_quality": 0.75,
    },
    StrategyName.QUALITY: {
        "estimated_cost": 0.06,
        "estimated_time_seconds": 45,
        "expected_quality": 0.9,
    },
    StrategyName.COST_OPTIMIZED: {
        "estimated_cost": DEFAULT_BUDGET,
        "estimated_time_seconds": 8,
        "expected_quality": 0.5,
    },
}


# Model pricing in USD per 1M tokens
MODEL_PRICING: dict[str, dict[str, float]] = {
    "grok-3-mini": {"input": 0.50, "output": 0.50},
    "grok-code-fast": {"input": 0.50, "output": 0.50},
    "claude-haiku-4-5": {"input": 1.00, "output": 5.00},
    "claude-haiku-4-5-20251001": {"input": 1.00, "output": 5.00},
    "claude-sonnet-4-5": {"input": 3.00, "output": 15.00},
    "claude-sonnet-4-5-20250929": {"input": 3.00, "output": 15.00},
    "claude-opus-4-1": {"input": 15.00, "output": 75.00},
}

FALLBACK_PRICING_MODEL = "claude-haiku-4-5"


def get_pricing(model: str | None) -> dict[str, float]:
    """Get per-million-token prices, falling back for unknown models."""
    if model and model in MODEL_PRICING:
        return MODEL_PRICING[model]
    return MODEL_PRICING[FALLBACK_PRICING_MODEL]


def estimate_tokens(text: str) -> int:
    """Estimate token count at ~4 characters per token, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def calculate_cost(model: str | None, tokens_in: int, tokens_out: int) -> float:
    """Calculate cost for a model call."""
    pricing = get_pricing(model)
    input_cost = (tokens_in / 1_000_000) * pricing["input"]
    output_cost = (tokens_out / 1_000_000) * pricing["output"]
    return input_cost + output_cost
