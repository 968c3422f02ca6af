"""Crush Orchestrator HTTP API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, status
from pydantic import BaseModel, Field

from crush_orchestrator import __version__
from crush_orchestrator.config import Settings
from crush_orchestrator.core.errors import (
    BudgetExhaustedError,
    InvocationError,
    InvocationTimeoutError,
    UnknownStrategyError,
)
from crush_orchestrator.core.orchestrator import Orchestrator
from crush_orchestrator.core.types import (
    CostEstimate,
    ExecuteRequest,
    ExecuteResult,
    StrategyName,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Request / Response Models
# =============================================================================


class ExecuteBody(BaseModel):
    """Request to execute a prompt."""

    prompt: str = Field(..., min_length=1, description="The prompt to execute")
    strategy: StrategyName | None = Field(
        default=None, description="Execution strategy (default: configured default)"
    )
    max_cost: float | None = Field(
        default=None, ge=0.0, description="Maximum cost in USD (used by cost-optimized)"
    )
    context: str | None = Field(
        default=None, description="Additional context from previous interactions"
    )
    session: str | None = Field(default=None, max_length=256, description="Crush session token")


class EvaluateBody(BaseModel):
    """Request to estimate a strategy without executing it."""

    prompt: str = Field(..., min_length=1, description="The prompt to evaluate")
    strategy: StrategyName | None = Field(
        default=None, description="Execution strategy to evaluate"
    )
    max_cost: float | None = Field(
        default=None, ge=0.0, description="Maximum cost budget for cost-optimized"
    )


class EvaluateResponse(CostEstimate):
    """Estimate plus the strategy it was computed for."""

    strategy: str


class StrategyInfo(BaseModel):
    """A registered strategy and its default projection."""

    name: str
    estimate: CostEstimate


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = __version__
    binary_path: str
    default_strategy: str


# =============================================================================
# FastAPI App
# =============================================================================

settings = Settings()

app = FastAPI(
    title=settings.api_title,
    description="Multi-model prompt orchestration over the crush CLI. "
    "Strategies: fast, balanced, quality, cost-optimized.",
    version=__version__,
)

app.state.settings = settings
app.state.orchestrator = Orchestrator.from_settings(settings)


def get_orchestrator(request: Request) -> Orchestrator:
    """Get the orchestrator attached to the app."""
    return request.app.state.orchestrator


def _resolve_strategy(strategy: StrategyName | None, request: Request) -> str:
    if strategy is not None:
        return strategy.value
    return request.app.state.settings.default_strategy.value


# =============================================================================
# Health Endpoint
# =============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    current: Settings = request.app.state.settings
    return HealthResponse(
        binary_path=current.binary_path,
        default_strategy=current.default_strategy.value,
    )


# =============================================================================
# Strategy Endpoints
# =============================================================================


@app.get("/strategies", response_model=list[StrategyInfo], tags=["Strategies"])
async def list_strategies(request: Request) -> list[StrategyInfo]:
    """List registered strategies with their default projections."""
    orchestrator = get_orchestrator(request)
    return [
        StrategyInfo(
            name=name,
            estimate=orchestrator.estimate(ExecuteRequest(prompt="-", strategy=name)),
        )
        for name in orchestrator.strategies
    ]


@app.post("/execute", response_model=ExecuteResult, tags=["Strategies"])
async def execute(body: ExecuteBody, request: Request) -> ExecuteResult:
    """Execute a prompt with multi-model orchestration."""
    orchestrator = get_orchestrator(request)
    execute_request = ExecuteRequest(
        prompt=body.prompt,
        strategy=_resolve_strategy(body.strategy, request),
        max_cost=body.max_cost,
        context=body.context,
        session=body.session,
    )

    try:
        return await orchestrator.execute(execute_request)
    except UnknownStrategyError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except BudgetExhaustedError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    except InvocationTimeoutError as e:
        logger.error("Execution timed out: %s", e.message)
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=e.message) from e
    except InvocationError as e:
        logger.error("Execution failed: %s", e.message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e


@app.post("/evaluate", response_model=EvaluateResponse, tags=["Strategies"])
async def evaluate(body: EvaluateBody, request: Request) -> EvaluateResponse:
    """Estimate cost, time and quality without executing anything."""
    orchestrator = get_orchestrator(request)
    strategy = _resolve_strategy(body.strategy, request)

    try:
        estimate = orchestrator.estimate(
            ExecuteRequest(prompt=body.prompt, strategy=strategy, max_cost=body.max_cost)
        )
    except UnknownStrategyError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e

    return EvaluateResponse(**estimate.model_dump(), strategy=strategy)
