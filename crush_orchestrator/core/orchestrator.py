"""Orchestrator for dispatching requests to execution strategies.

The orchestrator owns one strategy registry, built at construction, and
offers two paths:
- execute: run a request through the named strategy
- estimate: project cost, time and quality without calling any model
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from crush_orchestrator.core.errors import UnknownStrategyError
from crush_orchestrator.core.invoker.base import ModelInvoker
from crush_orchestrator.core.invoker.crush import CrushInvoker
from crush_orchestrator.core.quality.evaluator import QualityEvaluator
from crush_orchestrator.core.strategies.registry import StrategyRegistry, build_default_registry
from crush_orchestrator.core.types import (
    DEFAULT_BUDGET,
    CostEstimate,
    ExecuteRequest,
    ExecuteResult,
    STRATEGY_ESTIMATES,
    StrategyName,
)

if TYPE_CHECKING:
    from crush_orchestrator.config import Settings

logger = logging.getLogger(__name__)


class Orchestrator:
    """Routes execute requests to registered strategies.

    Usage:
        orchestrator = Orchestrator(invoker=CrushInvoker("/usr/local/bin/crush"))
        result = await orchestrator.execute(ExecuteRequest(prompt="Explain REST APIs"))
        estimate = orchestrator.estimate(ExecuteRequest(prompt="x", strategy="quality"))
    """

    def __init__(
        self,
        invoker: ModelInvoker | None = None,
        evaluator: QualityEvaluator | None = None,
        registry: StrategyRegistry | None = None,
        default_budget: float = DEFAULT_BUDGET,
    ):
        """Initialize the orchestrator.

        Args:
            invoker: Model invoker shared by the built-in strategies
            evaluator: Quality evaluator for strategies that score output
            registry: Prebuilt registry; the built-in strategies are used if omitted
            default_budget: Budget projected for cost-optimized when none is given
        """
        self._default_budget = default_budget
        if registry is None:
            registry = build_default_registry(
                invoker or CrushInvoker(),
                evaluator or QualityEvaluator(),
                default_budget=default_budget,
            )
        self._registry = registry

        logger.info("Orchestrator initialized with strategies: %s", ", ".join(registry.names()))

    @classmethod
    def from_settings(cls, settings: Settings, invoker: ModelInvoker | None = None) -> Orchestrator:
        """Build an orchestrator configured from settings."""
        invoker = invoker or CrushInvoker(
            binary_path=settings.binary_path,
            timeout=settings.invocation_timeout_seconds,
        )
        evaluator = QualityEvaluator(
            legacy_structure_signals=settings.quality_legacy_structure_signals,
        )
        registry = build_default_registry(
            invoker,
            evaluator,
            default_budget=settings.cost_optimized_default_budget,
            max_iterations=settings.quality_max_iterations,
            quality_threshold=settings.quality_threshold,
        )
        return cls(registry=registry, default_budget=settings.cost_optimized_default_budget)

    @property
    def strategies(self) -> list[str]:
        """Registered strategy names."""
        return self._registry.names()

    async def execute(self, request: ExecuteRequest) -> ExecuteResult:
        """Execute a request with its named strategy.

        Raises:
            UnknownStrategyError: If the strategy is not registered
            InvocationError: If any underlying model call fails
            BudgetExhaustedError: If a cost-optimized budget cannot cover any output
        """
        strategy = self._registry.get(request.strategy)

        logger.info("Executing request with %s strategy", strategy.name)
        return await strategy.execute(
            request.full_prompt(),
            max_cost=request.max_cost,
            session=request.session,
        )

    def estimate(self, request: ExecuteRequest) -> CostEstimate:
        """Project cost, time and quality for a request without executing it."""
        if request.strategy not in self._registry:
            raise UnknownStrategyError(request.strategy, self._registry.names())

        try:
            name = StrategyName(request.strategy)
        except ValueError:
            # Custom strategies have no projection beyond the default budget
            return CostEstimate(
                estimated_cost=self._budget_for(request),
                estimated_time_seconds=0,
                expected_quality=0,
            )

        projection = dict(STRATEGY_ESTIMATES[name])
        if name is StrategyName.COST_OPTIMIZED:
            projection["estimated_cost"] = self._budget_for(request)
        return CostEstimate(**projection)

    def _budget_for(self, request: ExecuteRequest) -> float:
        return self._default_budget if request.max_cost is None else request.max_cost
