"""Shared fixtures for orchestration tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from crush_orchestrator.core.errors import InvocationError
from crush_orchestrator.core.invoker.base import ModelInvoker
from crush_orchestrator.core.types import (
    UNSPECIFIED_MODEL,
    ModelResult,
    calculate_cost,
    estimate_tokens,
)


@dataclass
class RecordedCall:
    """Arguments of one fake invocation."""

    prompt: str
    model: str | None
    session: str | None
    max_tokens: int | None


@dataclass
class FakeInvoker(ModelInvoker):
    """Deterministic invoker returning scripted outputs in order.

    The last output repeats once the script runs out. Cost is computed from
    the price table unless ``cost`` is fixed; every call takes ``time_seconds``.
    """

    outputs: list[str] = field(default_factory=lambda: ["Result"])
    cost: float | None = None
    time_seconds: float = 1.0
    fail_on_call: int | None = None
    calls: list[RecordedCall] = field(default_factory=list)
    results: list[ModelResult] = field(default_factory=list)

    async def invoke(
        self,
        prompt: str,
        model: str | None = None,
        session: str | None = None,
        max_tokens: int | None = None,
    ) -> ModelResult:
        self.calls.append(RecordedCall(prompt, model, session, max_tokens))
        model_id = model or UNSPECIFIED_MODEL

        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise InvocationError(
                "crush exited with code 2: rate limited",
                model=model_id,
                exit_code=2,
                stderr="rate limited",
            )

        output = self.outputs[min(len(self.calls), len(self.outputs)) - 1]
        if max_tokens is not None:
            output = output[: max_tokens * 4]

        tokens_in = estimate_tokens(prompt)
        tokens_out = estimate_tokens(output)
        cost = self.cost if self.cost is not None else calculate_cost(model, tokens_in, tokens_out)

        result = ModelResult(
            model=model_id,
            output=output,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            cost=cost,
            time_seconds=self.time_seconds,
        )
        self.results.append(result)
        return result


BRIEF_OUTPUT = "Brief response"

RICH_OUTPUT = """# Comprehensive Microservices Architecture Guide

## Overview

This guide covers the architecture, implementation, and deployment of a
production-ready microservices system. The API gateway handles authentication
and authorization, then routes requests to downstream services.

- REST API endpoints with proper versioning
- GraphQL interface for complex queries
- Rate limiting and cache strategies
- Message queue for async communication

```python
async def deploy_service(config):
    container = await build_container(config)
    return await cluster.deploy(container)
```

The database layer uses SQL for transactional data and NoSQL for documents,
with encryption at rest and a hash index for lookups. Performance optimization
focuses on latency, scalability and a streaming pipeline.

## Conclusion

This architecture provides a scalable and maintainable foundation.
"""


@pytest.fixture
def fake_invoker() -> FakeInvoker:
    """Invoker that always answers with a short result."""
    return FakeInvoker()
