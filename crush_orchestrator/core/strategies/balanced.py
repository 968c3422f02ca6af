"""Balanced strategy: a fast draft refined by a stronger model."""

from __future__ import annotations

import logging

from crush_orchestrator.core.quality.evaluator import QualityEvaluator
from crush_orchestrator.core.invoker.base import ModelInvoker
from crush_orchestrator.core.strategies.base import Strategy
from crush_orchestrator.core.types import (
    FAST_MODEL,
    REFINE_MODEL,
    ExecuteResult,
    StrategyName,
)

logger = logging.getLogger(__name__)

REFINEMENT_TEMPLATE = """Refine and expand this analysis with more detail:

## Original Task
{prompt}

## Initial Analysis
{draft}

## Your Task
Provide a refined, detailed analysis including:
1. More comprehensive breakdown
2. Code examples where appropriate
3. Best practices
4. Implementation considerations"""


class BalancedStrategy(Strategy):
    """Two sequential calls: draft with the fast model, refine with a stronger one.

    Target: under ~30s, around $0.015, quality around 0.75.
    """

    name = StrategyName.BALANCED.value
    draft_model = FAST_MODEL
    refine_model = REFINE_MODEL

    def __init__(self, invoker: ModelInvoker, evaluator: QualityEvaluator):
        super().__init__(invoker)
        self._evaluator = evaluator

    def build_refinement_prompt(self, prompt: str, draft: str) -> str:
        """Embed the draft and original task into the refinement prompt."""
        return REFINEMENT_TEMPLATE.format(prompt=prompt, draft=draft)

    async def execute(
        self,
        prompt: str,
        max_cost: float | None = None,
        session: str | None = None,
    ) -> ExecuteResult:
        draft = await self._invoker.invoke(prompt, model=self.draft_model, session=session)

        refined = await self._invoker.invoke(
            self.build_refinement_prompt(prompt, draft.output),
            model=self.refine_model,
            session=session,
        )

        quality_score = self._evaluator.score(refined.output)
        logger.info(
            "Balanced strategy refined %s draft with %s, quality %.2f",
            draft.model,
            refined.model,
            quality_score,
        )

        # Two calls, one refinement pass
        return ExecuteResult.from_calls(
            result=refined.output,
            calls=[draft, refined],
            quality_score=quality_score,
            strategy=self.name,
            iterations=1,
        )
