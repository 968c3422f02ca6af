"""Base model invoker interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crush_orchestrator.core.types import ModelResult


class ModelInvoker(ABC):
    """Capability that performs one model call.

    Strategies only depend on this interface, so tests can substitute a
    deterministic invoker without spawning processes.
    """

    @abstractmethod
    async def invoke(
        self,
        prompt: str,
        model: str | None = None,
        session: str | None = None,
        max_tokens: int | None = None,
    ) -> "ModelResult":
        """Execute a single model call.

        Args:
            prompt: Prompt text sent to the model
            model: Model identifier (backend default when omitted)
            session: Optional session token passed through to the backend
            max_tokens: Optional ceiling on output tokens

        Returns:
            ModelResult with output, token counts, cost and timing

        Raises:
            InvocationError: If the call could not start or failed
        """
        pass
