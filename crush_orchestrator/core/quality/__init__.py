"""Quality evaluation for generated output."""

from crush_orchestrator.core.quality.evaluator import (
    QualityEvaluator,
    TECHNICAL_TERMS,
    count_technical_terms,
)

__all__ = [
    "QualityEvaluator",
    "TECHNICAL_TERMS",
    "count_technical_terms",
]
