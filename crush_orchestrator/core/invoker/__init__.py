"""Model invokers."""

from crush_orchestrator.core.invoker.base import ModelInvoker
from crush_orchestrator.core.invoker.crush import CrushInvoker

__all__ = [
    "ModelInvoker",
    "CrushInvoker",
]
