"""Crush Orchestrator: multi-model prompt orchestration over the crush CLI."""

__version__ = "0.1.0"
