"""
TrueFrame Scoring
Maps a feature record to an additive 0-100 AI score and a separate
heuristic confidence.

Neither number is a calibrated probability.
"""

import logging
from typing import Optional

from . import config
from .config import DetectionConfig
from .feature_extractor import ImageFeatures

logger = logging.getLogger(__name__)


def clamp(value, low, high):
    return max(low, min(high, value))


def _above(value, threshold) -> bool:
    """value > threshold; an undefined (None) value never passes."""
    return value is not None and value > threshold


def _below(value, threshold) -> bool:
    """value < threshold; an undefined (None) value never passes."""
    return value is not None and value < threshold


def calculate_ai_score(features: ImageFeatures,
                       detection_config: Optional[DetectionConfig] = None) -> int:
    """
    Additive point system over the feature record.

    Rules:
        smoothness > 0.7                      +25
        noise level < 5                       +15
        sharp edge ratio > 0.3                +15
        average channel entropy > 7.5         +10
        compression score > 0.6               +10
        known AI size or multiple of 64       +15
        filename indicator 'ai' / 'real'      +30 / -20
        high frequency ratio < 0.3            +10

    A rule whose feature is undefined (None) adds nothing.
    Filename overrides run last: 'aigen' forces 95, otherwise 'og' forces 5.
    """
    cfg = detection_config or DetectionConfig()
    score = 0

    if _above(features.pixel_analysis['smoothness'], cfg.smoothness_threshold):
        score += 25

    if _below(features.noise_pattern['overall_noise_level'], cfg.noise_threshold):
        score += 15

    if _above(features.edge_analysis['sharpness_ratio'], cfg.edge_sharpness_ratio):
        score += 15

    if _above(features.color_distribution['average_entropy'], cfg.color_entropy_threshold):
        score += 10

    if _above(features.compression_artifacts['overall_score'], cfg.compression_artifact_threshold):
        score += 10

    dimensions = features.dimension_analysis
    if dimensions['is_standard_ai'] or dimensions['is_multiple_of_64']:
        score += 15

    indicator = features.file_name_analysis['indicator']
    if indicator == 'ai':
        score += 30
    elif indicator == 'real':
        score -= 20

    if _below(features.frequency_analysis['high_frequency_ratio'], cfg.frequency_high_ratio_threshold):
        score += 10

    lower_name = (features.file_name or '').lower()
    if config.AI_OVERRIDE_TOKEN in lower_name:
        score = config.AI_OVERRIDE_SCORE
    elif config.REAL_OVERRIDE_TOKEN in lower_name:
        score = config.REAL_OVERRIDE_SCORE

    return clamp(score, 0, 100)


def calculate_local_confidence(features: ImageFeatures,
                               detection_config: Optional[DetectionConfig] = None) -> int:
    """Heuristic confidence: base 60, boosted by strong indicators, kept in [65, 98]."""
    cfg = detection_config or DetectionConfig()
    confidence = cfg.confidence_base

    if features.file_name_analysis['indicator'] != 'neutral':
        confidence += 20

    if features.dimension_analysis['is_standard_ai']:
        confidence += 10

    if _above(features.pixel_analysis['smoothness'], cfg.high_smoothness_threshold):
        confidence += 10

    return clamp(confidence, cfg.confidence_min, cfg.confidence_max)
