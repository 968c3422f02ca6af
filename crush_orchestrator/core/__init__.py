"""Multi-strategy prompt orchestration engine.

Runs a prompt through one of several execution strategies:
- fast: one cheap call
- balanced: a draft refined by a stronger model (default)
- quality: iterative refinement until a quality threshold is met
- cost-optimized: one call sized to fit a budget

Every result carries the models used, total cost, timing, a heuristic
quality score and the number of refinement rounds.
"""

from crush_orchestrator.core.types import (
    CostEstimate,
    ExecuteMetadata,
    ExecuteRequest,
    ExecuteResult,
    ModelResult,
    QualityMetrics,
    StrategyName,
    MODEL_PRICING,
    STRATEGY_ESTIMATES,
    calculate_cost,
    estimate_tokens,
)
from crush_orchestrator.core.errors import (
    OrchestratorError,
    InvocationError,
    InvocationTimeoutError,
    UnknownStrategyError,
    BudgetExhaustedError,
)
from crush_orchestrator.core.invoker import (
    ModelInvoker,
    CrushInvoker,
)
from crush_orchestrator.core.quality import QualityEvaluator
from crush_orchestrator.core.strategies import (
    Strategy,
    FastStrategy,
    BalancedStrategy,
    QualityStrategy,
    CostOptimizedStrategy,
    StrategyRegistry,
    build_default_registry,
)
from crush_orchestrator.core.orchestrator import Orchestrator

__all__ = [
    # Types
    "CostEstimate",
    "ExecuteMetadata",
    "ExecuteRequest",
    "ExecuteResult",
    "ModelResult",
    "QualityMetrics",
    "StrategyName",
    "MODEL_PRICING",
    "STRATEGY_ESTIMATES",
    "calculate_cost",
    "estimate_tokens",
    # Errors
    "OrchestratorError",
    "InvocationError",
    "InvocationTimeoutError",
    "UnknownStrategyError",
    "BudgetExhaustedError",
    # Invokers
    "ModelInvoker",
    "CrushInvoker",
    # Quality
    "QualityEvaluator",
    # Strategies
    "Strategy",
    "FastStrategy",
    "BalancedStrategy",
    "QualityStrategy",
    "CostOptimizedStrategy",
    "StrategyRegistry",
    "build_default_registry",
    # Orchestrator
    "Orchestrator",
]
