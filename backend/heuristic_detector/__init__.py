"""
TrueFrame Heuristic Detector Module
Guesses whether an image is AI-generated or camera-captured from pixel
statistics, dimensions and the filename.

Components:
- HeuristicImageDetector: Main pipeline (local scoring + optional external API)
- ImageBuffer / decode_image: RGBA pixel buffer and Pillow decoding
- Pixel extractors: smoothness, noise, edges, color, compression, frequency
- Metadata extractors: dimension whitelist, filename patterns
- RealityDefenderClient: Optional external detection API
- combine_results: 40/60 weighted fusion of local and external results
- fallback_detection: Basic filename + smoothness verdict

The scores are heuristics, not calibrated probabilities.
"""

from .config import DetectionConfig
from .exceptions import (
    DetectorError,
    ImageDecodeError,
    ExternalDetectionError,
    DetectionError,
)
from .image_buffer import ImageBuffer, decode_image
from .pixel_analyzer import (
    analyze_pixel_patterns,
    analyze_noise_pattern,
    analyze_edges,
    analyze_color_distribution,
    detect_compression_artifacts,
    analyze_frequency_domain,
)
from .metadata_analyzer import analyze_dimensions, analyze_filename
from .feature_extractor import ImageFeatures, extract_features
from .scoring import calculate_ai_score, calculate_local_confidence
from .results import DetectionResult
from .external_detector import RealityDefenderClient
from .combiner import combine_results
from .fallback import fallback_detection
from .detector import HeuristicImageDetector, create_detector

__all__ = [
    # Core detector
    'HeuristicImageDetector',
    'create_detector',
    'DetectionConfig',
    'DetectionResult',

    # Errors
    'DetectorError',
    'ImageDecodeError',
    'ExternalDetectionError',
    'DetectionError',

    # Pixel buffer
    'ImageBuffer',
    'decode_image',

    # Feature extraction
    'analyze_pixel_patterns',
    'analyze_noise_pattern',
    'analyze_edges',
    'analyze_color_distribution',
    'detect_compression_artifacts',
    'analyze_frequency_domain',
    'analyze_dimensions',
    'analyze_filename',
    'ImageFeatures',
    'extract_features',

    # Scoring and fusion
    'calculate_ai_score',
    'calculate_local_confidence',
    'RealityDefenderClient',
    'combine_results',
    'fallback_detection',
]
