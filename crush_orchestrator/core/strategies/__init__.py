"""Execution strategies."""

from crush_orchestrator.core.strategies.base import Strategy
from crush_orchestrator.core.strategies.fast import FastStrategy
from crush_orchestrator.core.strategies.balanced import BalancedStrategy
from crush_orchestrator.core.strategies.quality import QualityStrategy
from crush_orchestrator.core.strategies.cost_optimized import CostOptimizedStrategy
from crush_orchestrator.core.strategies.registry import (
    StrategyRegistry,
    build_default_registry,
)

__all__ = [
    "Strategy",
    "FastStrategy",
    "BalancedStrategy",
    "QualityStrategy",
    "CostOptimizedStrategy",
    "StrategyRegistry",
    "build_default_registry",
]
