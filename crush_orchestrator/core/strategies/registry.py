"""Registry mapping strategy names to strategy instances."""

from __future__ import annotations

from crush_orchestrator.core.errors import UnknownStrategyError
from crush_orchestrator.core.invoker.base import ModelInvoker
from crush_orchestrator.core.quality.evaluator import QualityEvaluator
from crush_orchestrator.core.strategies.balanced import BalancedStrategy
from crush_orchestrator.core.strategies.base import Strategy
from crush_orchestrator.core.strategies.cost_optimized import CostOptimizedStrategy
from crush_orchestrator.core.strategies.fast import FastStrategy
from crush_orchestrator.core.strategies.quality import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_QUALITY_THRESHOLD,
    QualityStrategy,
)
from crush_orchestrator.core.types import DEFAULT_BUDGET


class StrategyRegistry:
    """Registry of strategies keyed by name.

    Built once and handed to an Orchestrator; it is only read afterwards.
    """

    def __init__(self, strategies: list[Strategy] | None = None):
        self._strategies: dict[str, Strategy] = {}
        for strategy in strategies or []:
            self.register(strategy)

    def register(self, strategy: Strategy, name: str | None = None) -> None:
        """Register a strategy under its own name or an explicit one."""
        self._strategies[name or strategy.name] = strategy

    def get(self, name: str) -> Strategy:
        """Get a strategy by name.

        Raises:
            UnknownStrategyError: If no strategy is registered under ``name``
        """
        try:
            return self._strategies[name]
        except KeyError:
            raise UnknownStrategyError(name, self.names()) from None

    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._strategies)

    def __contains__(self, name: object) -> bool:
        return name in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)


def build_default_registry(
    invoker: ModelInvoker,
    evaluator: QualityEvaluator | None = None,
    default_budget: float = DEFAULT_BUDGET,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    quality_threshold: float = DEFAULT_QUALITY_THRESHOLD,
) -> StrategyRegistry:
    """Build a registry holding the four built-in strategies."""
    evaluator = evaluator or QualityEvaluator()
    return StrategyRegistry([
        FastStrategy(invoker),
        BalancedStrategy(invoker, evaluator),
        QualityStrategy(invoker, evaluator, max_iterations, quality_threshold),
        CostOptimizedStrategy(invoker, default_budget),
    ])
