"""Errors raised by the orchestration engine."""

from __future__ import annotations


class OrchestratorError(Exception):
    """Base error for the orchestration engine."""

    def __init__(self, message: str, code: str = "orchestrator_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvocationError(OrchestratorError):
    """Raised when the external model call could not start or failed."""

    def __init__(
        self,
        message: str,
        model: str,
        exit_code: int | None = None,
        stderr: str = "",
        code: str = "invocation_failed",
    ):
        self.model = model
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(message, code)


class InvocationTimeoutError(InvocationError):
    """Raised when the external model call exceeds its time limit."""

    def __init__(self, model: str, timeout: float, stderr: str = ""):
        self.timeout = timeout
        super().__init__(
            f"Model call to '{model}' timed out after {timeout:g}s",
            model=model,
            stderr=stderr,
            code="invocation_timeout",
        )


class UnknownStrategyError(OrchestratorError):
    """Raised when a request names a strategy that is not registered."""

    def __init__(self, strategy: str, available: list[str]):
        self.strategy = strategy
        self.available = available
        super().__init__(
            f"Unknown strategy: '{strategy}'. Available: {', '.join(available)}",
            "unknown_strategy",
        )


class BudgetExhaustedError(OrchestratorError):
    """Raised when a budget cannot cover a single output token."""

    def __init__(self, budget: float, input_cost: float):
        self.budget = budget
        self.input_cost = input_cost
        super().__init__(
            f"Budget ${budget:.6f} leaves no room for output "
            f"after estimated input cost ${input_cost:.6f}",
            "budget_exhausted",
        )
