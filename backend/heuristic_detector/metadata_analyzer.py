"""
TrueFrame Metadata Analyzer
Dimension and filename heuristics.

AI generators tend to emit a small set of fixed resolutions (multiples of
64, often square), and test or export tooling often leaves telling words
in the filename.
"""

import logging
from typing import Any, Dict, Iterable, Tuple

from . import config

logger = logging.getLogger(__name__)


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def _is_multiple_of_64(n: int) -> bool:
    return n % 64 == 0


def analyze_dimensions(
    width: int,
    height: int,
    common_dimensions: Iterable[Tuple[int, int]] = config.COMMON_AI_DIMENSIONS,
) -> Dict[str, Any]:
    """
    Match dimensions against known generator output sizes.

    The whitelist match and the power-of-two / multiple-of-64 flags are
    computed independently of each other.
    """
    return {
        'is_standard_ai': (width, height) in set(common_dimensions),
        'is_power_of_two': _is_power_of_two(width) and _is_power_of_two(height),
        'is_multiple_of_64': _is_multiple_of_64(width) and _is_multiple_of_64(height),
        'aspect_ratio': width / height,
        'is_square': width == height,
    }


def analyze_filename(
    filename: str,
    ai_patterns: Iterable[str] = config.AI_FILENAME_PATTERNS,
    real_patterns: Iterable[str] = config.REAL_FILENAME_PATTERNS,
) -> Dict[str, Any]:
    """
    Classify a filename as 'ai', 'real' or 'neutral'.

    When both lists match, 'real' wins.
    """
    lower_name = (filename or '').lower()

    ai_indicators = [p for p in ai_patterns if p in lower_name]
    real_indicators = [p for p in real_patterns if p in lower_name]

    indicator = 'neutral'
    if ai_indicators:
        indicator = 'ai'
    if real_indicators:
        indicator = 'real'

    if indicator != 'neutral':
        logger.debug(f"Filename '{filename}' classified as {indicator}: "
                     f"ai={ai_indicators}, real={real_indicators}")

    return {
        'indicator': indicator,
        'ai_indicators': ai_indicators,
        'real_indicators': real_indicators,
        'confidence': max(len(ai_indicators), len(real_indicators)) * 0.2,
    }
