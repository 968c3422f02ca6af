"""Base strategy interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crush_orchestrator.core.invoker.base import ModelInvoker
    from crush_orchestrator.core.types import ExecuteResult


class Strategy(ABC):
    """A policy for how many model calls to make, in what order, and when to stop.

    Calls are issued one at a time; later prompts may depend on earlier
    output. An InvocationError from any call propagates unchanged.
    """

    name: str = "base"

    def __init__(self, invoker: "ModelInvoker"):
        self._invoker = invoker

    @abstractmethod
    async def execute(
        self,
        prompt: str,
        max_cost: float | None = None,
        session: str | None = None,
    ) -> "ExecuteResult":
        """Execute the prompt under this strategy.

        Args:
            prompt: Task description
            max_cost: Optional budget ceiling in USD
            session: Optional session token forwarded to every call

        Returns:
            ExecuteResult with the final text and accounting metadata
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
