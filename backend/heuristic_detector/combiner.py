"""
TrueFrame Result Combiner
Weighted fusion of the local heuristic result and the optional external
API result (local 40%, external 60%).
"""

import logging
from typing import Optional

from . import config
from .results import METHOD_COMBINED, DetectionResult, round_half_up

logger = logging.getLogger(__name__)


def _signed_vote(result: DetectionResult) -> float:
    """A method's confidence if it voted AI, otherwise 100 - confidence."""
    return result.confidence if result.is_ai_generated else 100 - result.confidence


def combine_results(local_result: DetectionResult,
                    external_result: Optional[DetectionResult],
                    local_weight: float = config.LOCAL_WEIGHT,
                    external_weight: float = config.EXTERNAL_WEIGHT) -> DetectionResult:
    """
    Merge local and external results.

    Without an external result the local result is returned unchanged.
    Otherwise the confidence is the weighted average of both confidences,
    and the verdict comes from the weighted signed votes (> 50 means AI),
    which can disagree with a plain average of the two verdicts.
    """
    if external_result is None:
        return local_result

    combined_confidence = round_half_up(
        local_result.confidence * local_weight
        + external_result.confidence * external_weight
    )

    weighted_score = (
        _signed_vote(local_result) * local_weight
        + _signed_vote(external_result) * external_weight
    )

    logger.info(f"Combined {local_result.method} + {external_result.method}: "
                f"weighted_score={weighted_score:.1f}, confidence={combined_confidence}")

    return DetectionResult(
        method=METHOD_COMBINED,
        ai_score=weighted_score,
        confidence=combined_confidence,
        details={
            **local_result.details,
            'external_method': external_result.method,
            'external_confidence': external_result.confidence,
            'combination_method': 'weighted_average',
        },
        features=local_result.features,
    )
