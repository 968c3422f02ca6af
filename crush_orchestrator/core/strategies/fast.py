"""Fast strategy: one cheap, low-latency call."""

from __future__ import annotations

import logging

from crush_orchestrator.core.strategies.base import Strategy
from crush_orchestrator.core.types import (
    FAST_MODEL,
    ExecuteResult,
    StrategyName,
)

logger = logging.getLogger(__name__)

# Not scored; the nominal quality of a single fast answer
FAST_QUALITY = 0.6


class FastStrategy(Strategy):
    """Single call against the fastest, cheapest model.

    Target: under ~10s and ~$0.005.
    """

    name = StrategyName.FAST.value
    model = FAST_MODEL

    async def execute(
        self,
        prompt: str,
        max_cost: float | None = None,
        session: str | None = None,
    ) -> ExecuteResult:
        result = await self._invoker.invoke(prompt, model=self.model, session=session)

        logger.info("Fast strategy finished with %s in %.2fs", result.model, result.time_seconds)

        return ExecuteResult.from_calls(
            result=result.output,
            calls=[result],
            quality_score=FAST_QUALITY,
            strategy=self.name,
            iterations=1,
        )
