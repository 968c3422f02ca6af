"""Tests for the execution strategies."""

from __future__ import annotations

import pytest

from crush_orchestrator.core.errors import BudgetExhaustedError, InvocationError
from crush_orchestrator.core.quality import QualityEvaluator
from crush_orchestrator.core.strategies import (
    BalancedStrategy,
    CostOptimizedStrategy,
    FastStrategy,
    QualityStrategy,
)
from tests.conftest import BRIEF_OUTPUT, RICH_OUTPUT, FakeInvoker


@pytest.fixture
def evaluator() -> QualityEvaluator:
    """Evaluator inspecting the real text."""
    return QualityEvaluator()


def assert_totals_are_sums(result, invoker: FakeInvoker) -> None:
    """Totals equal the sums over the recorded calls."""
    assert len(result.metadata.models_used) == len(invoker.calls)
    assert result.metadata.total_cost == pytest.approx(sum(call.cost for call in invoker.results))
    assert result.metadata.execution_time_seconds == pytest.approx(
        invoker.time_seconds * len(invoker.calls)
    )


# ============================================================================
# FastStrategy
# ============================================================================


class TestFastStrategy:
    """Test the single-call strategy."""

    @pytest.mark.asyncio
    async def test_uses_single_fast_model(self):
        """Exactly one call is made against grok-3-mini."""
        invoker = FakeInvoker(outputs=["Quick analysis result"], cost=0.001)

        result = await FastStrategy(invoker).execute("Test prompt")

        assert len(invoker.calls) == 1
        assert invoker.calls[0].model == "grok-3-mini"
        assert invoker.calls[0].prompt == "Test prompt"
        assert result.result == "Quick analysis result"
        assert result.metadata.models_used == ["grok-3-mini"]
        assert result.metadata.strategy == "fast"
        assert result.metadata.iterations == 1

    @pytest.mark.asyncio
    async def test_low_cost_and_nominal_quality(self):
        """Cost passes through and quality is the nominal 0.6."""
        invoker = FakeInvoker(cost=0.0015, time_seconds=3)

        result = await FastStrategy(invoker).execute("Explain REST APIs")

        assert result.metadata.total_cost == pytest.approx(0.0015)
        assert result.metadata.total_cost < 0.01
        assert result.metadata.execution_time_seconds == pytest.approx(3)
        assert result.metadata.quality_score == pytest.approx(0.6)

    @pytest.mark.asyncio
    async def test_session_forwarded(self):
        """The session token reaches the invoker."""
        invoker = FakeInvoker()

        await FastStrategy(invoker).execute("Test", session="abc")

        assert invoker.calls[0].session == "abc"

    @pytest.mark.asyncio
    async def test_invocation_error_propagates(self):
        """A failed call aborts the strategy unchanged."""
        invoker = FakeInvoker(fail_on_call=1)

        with pytest.raises(InvocationError) as exc_info:
            await FastStrategy(invoker).execute("Test")

        assert exc_info.value.exit_code == 2


# ============================================================================
# BalancedStrategy
# ============================================================================


class TestBalancedStrategy:
    """Test the draft-then-refine strategy."""

    @pytest.mark.asyncio
    async def test_uses_fast_then_refine_model(self, evaluator):
        """Two calls in order: grok-3-mini then claude-haiku-4-5."""
        invoker = FakeInvoker(outputs=["Quick outline", "Detailed refinement"])

        result = await BalancedStrategy(invoker, evaluator).execute("Design an API")

        assert [call.model for call in invoker.calls] == ["grok-3-mini", "claude-haiku-4-5"]
        assert result.metadata.models_used == ["grok-3-mini", "claude-haiku-4-5"]
        assert result.metadata.strategy == "balanced"
        assert result.metadata.iterations == 1
        assert result.result == "Detailed refinement"

    @pytest.mark.asyncio
    async def test_draft_passed_into_refinement_prompt(self, evaluator):
        """The second prompt contains the draft and the original task."""
        invoker = FakeInvoker(outputs=["Initial analysis", "Refined result"])

        await BalancedStrategy(invoker, evaluator).execute("Test prompt")

        second_prompt = invoker.calls[1].prompt
        assert "Initial analysis" in second_prompt
        assert "Test prompt" in second_prompt

    @pytest.mark.asyncio
    async def test_quality_scored_from_refined_output(self, evaluator):
        """Quality is the evaluator's score of the final text."""
        invoker = FakeInvoker(outputs=["Quick", RICH_OUTPUT])

        result = await BalancedStrategy(invoker, evaluator).execute("Test")

        assert result.metadata.quality_score == pytest.approx(evaluator.score(RICH_OUTPUT))
        assert result.metadata.quality_score > 0.5

    @pytest.mark.asyncio
    async def test_cost_is_sum_of_both_calls(self, evaluator):
        """Total cost and time add up both calls."""
        invoker = FakeInvoker(outputs=["Quick", RICH_OUTPUT], time_seconds=4)

        result = await BalancedStrategy(invoker, evaluator).execute("Test")

        assert_totals_are_sums(result, invoker)

    @pytest.mark.asyncio
    async def test_cost_adds_distinct_call_costs(self, evaluator):
        """Draft and refinement are priced separately and both count."""
        invoker = FakeInvoker(outputs=["Quick", RICH_OUTPUT])

        result = await BalancedStrategy(invoker, evaluator).execute("Test")

        draft, refined = invoker.results
        assert draft.cost > 0
        assert draft.cost != refined.cost
        assert result.metadata.total_cost == pytest.approx(draft.cost + refined.cost)
        assert result.metadata.total_cost > refined.cost

    @pytest.mark.asyncio
    async def test_failure_in_refinement_aborts(self, evaluator):
        """An error on the second call propagates with no partial result."""
        invoker = FakeInvoker(fail_on_call=2)

        with pytest.raises(InvocationError):
            await BalancedStrategy(invoker, evaluator).execute("Test")

        assert len(invoker.calls) == 2


# ============================================================================
# QualityStrategy
# ============================================================================


class TestQualityStrategy:
    """Test the iterative refinement strategy."""

    @pytest.mark.asyncio
    async def test_stops_at_max_iterations(self, evaluator):
        """Low-quality output runs all three rounds and no more."""
        invoker = FakeInvoker(outputs=[BRIEF_OUTPUT])

        result = await QualityStrategy(invoker, evaluator, 3).execute("Test")

        assert len(invoker.calls) == 3
        assert result.metadata.iterations == 3
        assert result.metadata.strategy == "quality"

    @pytest.mark.asyncio
    async def test_model_sequence(self, evaluator):
        """Outline on grok-3-mini, then claude-sonnet-4-5 expansions."""
        invoker = FakeInvoker(outputs=[BRIEF_OUTPUT])

        result = await QualityStrategy(invoker, evaluator, 3).execute("Design a microservices system")

        assert result.metadata.models_used == [
            "grok-3-mini",
            "claude-sonnet-4-5",
            "claude-sonnet-4-5",
        ]

    @pytest.mark.asyncio
    async def test_later_rounds_alternate_models(self, evaluator):
        """Beyond round three the refine and detail models alternate."""
        invoker = FakeInvoker(outputs=[BRIEF_OUTPUT])

        result = await QualityStrategy(invoker, evaluator, 5).execute("Test")

        assert result.metadata.models_used == [
            "grok-3-mini",
            "claude-sonnet-4-5",
            "claude-sonnet-4-5",
            "claude-haiku-4-5",
            "claude-sonnet-4-5",
        ]

    @pytest.mark.asyncio
    async def test_stops_once_threshold_met(self, evaluator):
        """The loop ends as soon as a round scores at least 0.75."""
        invoker = FakeInvoker(outputs=["Quick outline", RICH_OUTPUT, "never used"])

        result = await QualityStrategy(invoker, evaluator, 3).execute("Complex task")

        assert len(invoker.calls) == 2
        assert result.metadata.iterations == 2
        assert result.metadata.quality_score >= 0.75
        assert result.result == RICH_OUTPUT

    @pytest.mark.asyncio
    async def test_strong_outline_stops_after_first_round(self, evaluator):
        """An outline already above threshold needs no refinement."""
        invoker = FakeInvoker(outputs=[RICH_OUTPUT])

        result = await QualityStrategy(invoker, evaluator, 3).execute("Test")

        assert result.metadata.iterations == 1
        assert result.metadata.models_used == ["grok-3-mini"]

    @pytest.mark.asyncio
    async def test_prompts_carry_previous_output(self, evaluator):
        """Round 2 sees the task and outline; round 3 sees round 2's output."""
        invoker = FakeInvoker(outputs=["outline text", "detail text", BRIEF_OUTPUT])

        await QualityStrategy(invoker, evaluator, 3).execute("Design a blog API")

        assert invoker.calls[0].prompt == "Design a blog API"
        assert "Design a blog API" in invoker.calls[1].prompt
        assert "outline text" in invoker.calls[1].prompt
        assert "detail text" in invoker.calls[2].prompt

    @pytest.mark.asyncio
    async def test_final_score_not_below_first_round(self, evaluator):
        """A worse refinement never replaces a better earlier round."""
        first = "# Plan\n\n- step one\n- step two\n\nIn summary: ship the API."
        invoker = FakeInvoker(outputs=[first, BRIEF_OUTPUT, BRIEF_OUTPUT])

        result = await QualityStrategy(invoker, evaluator, 3).execute("Design a blog API")

        assert 1 <= result.metadata.iterations <= 3
        assert result.metadata.quality_score >= evaluator.score(first)
        assert result.result == first

    @pytest.mark.asyncio
    async def test_totals_are_sums(self, evaluator):
        """Cost and time add up over every round."""
        invoker = FakeInvoker(outputs=[BRIEF_OUTPUT], time_seconds=5)

        result = await QualityStrategy(invoker, evaluator, 3).execute("Test")

        assert_totals_are_sums(result, invoker)

    def test_rejects_zero_iterations(self, evaluator):
        """At least one round is required."""
        with pytest.raises(ValueError):
            QualityStrategy(FakeInvoker(), evaluator, 0)


# ============================================================================
# CostOptimizedStrategy
# ============================================================================


class TestCostOptimizedStrategy:
    """Test the budget-sized strategy."""

    @pytest.mark.asyncio
    async def test_uses_cheapest_model_once(self):
        """One call against grok-3-mini."""
        invoker = FakeInvoker()

        result = await CostOptimizedStrategy(invoker, 0.01).execute("Simple task")

        assert len(invoker.calls) == 1
        assert invoker.calls[0].model == "grok-3-mini"
        assert result.metadata.strategy == "cost-optimized"
        assert result.metadata.iterations == 1
        assert result.metadata.quality_score == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_default_budget_hits_hard_cap(self):
        """A $0.01 budget affords more than the 1000-token cap."""
        invoker = FakeInvoker()

        await CostOptimizedStrategy(invoker, 0.01).execute("Simple task")

        assert invoker.calls[0].max_tokens == 1000
        assert "1000 tokens" in invoker.calls[0].prompt

    @pytest.mark.asyncio
    async def test_small_budget_limits_output_tokens(self):
        """A tiny budget shrinks the ceiling below the cap."""
        invoker = FakeInvoker()

        await CostOptimizedStrategy(invoker).execute("Large task", max_cost=0.0001)

        max_tokens = invoker.calls[0].max_tokens
        assert 1 <= max_tokens < 1000

    @pytest.mark.asyncio
    async def test_stays_within_budget(self):
        """Long output is cut so the call costs no more than the budget."""
        invoker = FakeInvoker(outputs=["word " * 5000])
        budget = 0.00020025

        result = await CostOptimizedStrategy(invoker).execute("Large task", max_cost=budget)

        assert result.metadata.total_cost <= budget

    @pytest.mark.asyncio
    async def test_zero_budget_raises_before_calling(self):
        """A budget that cannot pay for one token fails without a call."""
        invoker = FakeInvoker()

        with pytest.raises(BudgetExhaustedError) as exc_info:
            await CostOptimizedStrategy(invoker).execute("Task", max_cost=0.0)

        assert exc_info.value.code == "budget_exhausted"
        assert invoker.calls == []

    def test_ceiling_from_prices(self):
        """The ceiling converts leftover budget at the output price."""
        strategy = CostOptimizedStrategy(FakeInvoker())
        prompt = strategy.build_prompt("x" * 35, 1000)
        # grok-3-mini charges $0.50/M both ways
        input_cost = -(-len(prompt) // 4) * 0.5 / 1_000_000
        budget = input_cost + 0.0000502

        assert strategy.output_token_ceiling("x" * 35, budget) == 100
