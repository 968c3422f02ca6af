"""Cost-optimized strategy: one call sized to fit a budget."""

from __future__ import annotations

import logging
import math

from crush_orchestrator.core.errors import BudgetExhaustedError
from crush_orchestrator.core.invoker.base import ModelInvoker
from crush_orchestrator.core.strategies.base import Strategy
from crush_orchestrator.core.types import (
    DEFAULT_BUDGET,
    FAST_MODEL,
    ExecuteResult,
    StrategyName,
    estimate_tokens,
    get_pricing,
)

logger = logging.getLogger(__name__)

# Not scored; the nominal quality of a budget-capped answer
COST_OPTIMIZED_QUALITY = 0.5

MAX_OUTPUT_TOKENS = 1000

BREVITY_TEMPLATE = """{prompt}

Answer concisely in at most {max_tokens} tokens."""


class CostOptimizedStrategy(Strategy):
    """Single call on the cheapest model with an output ceiling derived from the budget.

    The budget left after the estimated input cost is converted into an
    output-token ceiling at the model's output price, and the invoker cuts
    output at that ceiling, so the call stays within budget by construction.
    """

    name = StrategyName.COST_OPTIMIZED.value
    model = FAST_MODEL

    def __init__(
        self,
        invoker: ModelInvoker,
        default_max_cost: float = DEFAULT_BUDGET,
        max_output_tokens: int = MAX_OUTPUT_TOKENS,
    ):
        super().__init__(invoker)
        self.default_max_cost = default_max_cost
        self.max_output_tokens = max_output_tokens

    def build_prompt(self, prompt: str, max_tokens: int) -> str:
        return BREVITY_TEMPLATE.format(prompt=prompt, max_tokens=max_tokens)

    def output_token_ceiling(self, prompt: str, budget: float) -> int:
        """Convert a budget into the number of output tokens it can pay for.

        Raises:
            BudgetExhaustedError: If not even one output token fits
        """
        pricing = get_pricing(self.model)

        # Sized with the widest ceiling so the final prompt is never longer
        sized_prompt = self.build_prompt(prompt, self.max_output_tokens)
        input_cost = estimate_tokens(sized_prompt) / 1_000_000 * pricing["input"]
        remaining = budget - input_cost

        if pricing["output"] > 0:
            affordable = math.floor(remaining / pricing["output"] * 1_000_000)
        else:
            affordable = self.max_output_tokens if remaining >= 0 else 0

        if affordable < 1:
            raise BudgetExhaustedError(budget, input_cost)

        return min(affordable, self.max_output_tokens)

    async def execute(
        self,
        prompt: str,
        max_cost: float | None = None,
        session: str | None = None,
    ) -> ExecuteResult:
        budget = self.default_max_cost if max_cost is None else max_cost
        max_tokens = self.output_token_ceiling(prompt, budget)

        logger.info("Cost-optimized budget $%.4f allows %d output tokens", budget, max_tokens)

        result = await self._invoker.invoke(
            self.build_prompt(prompt, max_tokens),
            model=self.model,
            session=session,
            max_tokens=max_tokens,
        )

        return ExecuteResult.from_calls(
            result=result.output,
            calls=[result],
            quality_score=COST_OPTIMIZED_QUALITY,
            strategy=self.name,
            iterations=1,
        )
