"""
TrueFrame Detection Results
Immutable result record shared by the local, external, combined and
fallback detection paths.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from .config import AI_VERDICT_THRESHOLD

METHOD_LOCAL = 'local'
METHOD_REALITY_DEFENDER = 'reality_defender'
METHOD_FALLBACK = 'fallback'
METHOD_COMBINED = 'combined'


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def sanitize_for_json(obj: Any) -> Any:
    """
    Recursively convert numpy types to Python native types for JSON serialization.
    """
    if isinstance(obj, dict):
        return {k: sanitize_for_json(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [sanitize_for_json(i) for i in obj]
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, (np.integer, np.floating)):
        return obj.item()
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    else:
        return obj


@dataclass(frozen=True)
class DetectionResult:
    """
    Outcome of one detection method.

    The verdict is derived from ai_score on access, so it always agrees
    with the score it was built from.
    """
    method: str
    ai_score: float
    confidence: int
    details: Dict[str, Any] = field(default_factory=dict)
    analysis_time: float = 0.0
    raw_score: Optional[float] = None
    features: Optional[Any] = None

    @property
    def is_ai_generated(self) -> bool:
        return self.ai_score > AI_VERDICT_THRESHOLD

    def to_dict(self, include_features: bool = False) -> Dict[str, Any]:
        result = {
            'method': self.method,
            'is_ai_generated': self.is_ai_generated,
            'ai_score': self.ai_score,
            'confidence': self.confidence,
            'details': self.details,
            'analysis_time': round(self.analysis_time, 1),
        }
        if self.raw_score is not None:
            result['raw_score'] = self.raw_score
        if include_features and self.features is not None:
            result['features'] = self.features.summary()
        return sanitize_for_json(result)
