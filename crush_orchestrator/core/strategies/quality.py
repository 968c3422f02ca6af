"""Quality strategy: iterative refinement until a quality threshold is met."""

from __future__ import annotations

import logging

from crush_orchestrator.core.invoker.base import ModelInvoker
from crush_orchestrator.core.quality.evaluator import QualityEvaluator
from crush_orchestrator.core.strategies.base import Strategy
from crush_orchestrator.core.types import (
    DETAIL_MODEL,
    FAST_MODEL,
    REFINE_MODEL,
    ExecuteResult,
    ModelResult,
    StrategyName,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 3
DEFAULT_QUALITY_THRESHOLD = 0.75

DETAIL_TEMPLATE = """Provide a comprehensive, detailed analysis:

## Original Task
{prompt}

## Initial Outline
{outline}

## Requirements
1. Detailed architecture and design
2. Multiple code examples
3. Step-by-step implementation guide
4. Error handling and edge cases
5. Testing strategies
6. Best practices and patterns"""

ENHANCEMENT_TEMPLATE = """The previous response needs more depth. Enhance it further:

Current Response:
{current}

Add:
1. More detailed examples
2. Architecture diagrams (ASCII art)
3. Performance considerations
4. Security best practices
5. Deployment strategies"""


class QualityStrategy(Strategy):
    """Outline, expand, then keep refining while the score is below threshold.

    Round 1 drafts an outline with the fast model, round 2 expands it with
    the detail model, and later rounds enhance the current response while
    alternating between the detail and refine models. Every round is scored;
    the best-scoring round is returned, so the final score never drops below
    the first round's. An outline that already meets the threshold ends the
    loop after round 1, skipping the detail model entirely.

    Target: under ~60s, around $0.06, quality around 0.9.
    """

    name = StrategyName.QUALITY.value

    def __init__(
        self,
        invoker: ModelInvoker,
        evaluator: QualityEvaluator,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        quality_threshold: float = DEFAULT_QUALITY_THRESHOLD,
    ):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        super().__init__(invoker)
        self._evaluator = evaluator
        self.max_iterations = max_iterations
        self.quality_threshold = quality_threshold

    def select_model(self, round_number: int) -> str:
        """Pick the model for a 1-based round number."""
        if round_number == 1:
            return FAST_MODEL
        if round_number == 2:
            return DETAIL_MODEL
        return DETAIL_MODEL if (round_number - 1) % 2 == 0 else REFINE_MODEL

    def build_prompt(self, round_number: int, prompt: str, current: str) -> str:
        """Build the prompt for a round from the task and the latest output."""
        if round_number == 1:
            return prompt
        if round_number == 2:
            return DETAIL_TEMPLATE.format(prompt=prompt, outline=current)
        return ENHANCEMENT_TEMPLATE.format(current=current)

    async def execute(
        self,
        prompt: str,
        max_cost: float | None = None,
        session: str | None = None,
    ) -> ExecuteResult:
        calls: list[ModelResult] = []
        current = ""
        best_output = ""
        best_score = -1.0
        iterations = 0

        while iterations < self.max_iterations:
            round_number = iterations + 1
            result = await self._invoker.invoke(
                self.build_prompt(round_number, prompt, current),
                model=self.select_model(round_number),
                session=session,
            )
            calls.append(result)
            current = result.output
            iterations = round_number

            score = self._evaluator.score(current)
            logger.debug("Quality round %d with %s scored %.2f", round_number, result.model, score)

            if score >= best_score:
                best_output, best_score = current, score

            if score >= self.quality_threshold:
                break

        logger.info(
            "Quality strategy finished after %d/%d rounds, quality %.2f",
            iterations,
            self.max_iterations,
            best_score,
        )

        return ExecuteResult.from_calls(
            result=best_output,
            calls=calls,
            quality_score=best_score,
            strategy=self.name,
            iterations=iterations,
        )
