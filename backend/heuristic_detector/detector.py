"""
TrueFrame Heuristic Image Detector
Main detector class for AI-generated image detection.

Pipeline:
1. Decode the upload into an RGBA buffer (Pillow)
2. Extract pixel and metadata features
3. Score the features (additive AI score + heuristic confidence)
4. Optionally ask the Reality Defender API for a second opinion
5. Combine both results with a fixed 40/60 weighting

Decode failures are fatal. External API failures silently degrade to the
local result. Anything unexpected in extraction or scoring surfaces as a
DetectionError, which detect_with_fallback turns into a basic fallback
verdict.
"""

import dataclasses
import logging
import time
from typing import Optional

from .combiner import combine_results
from .config import DetectionConfig
from .exceptions import DetectionError, ExternalDetectionError
from .external_detector import RealityDefenderClient
from .fallback import fallback_detection
from .feature_extractor import extract_features
from .image_buffer import ImageBuffer, decode_image
from .results import METHOD_LOCAL, DetectionResult
from .scoring import calculate_ai_score, calculate_local_confidence

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class HeuristicImageDetector:
    """
    AI-Generated Image Detector

    Combines:
    - Pixel statistics (smoothness, noise, edges, color entropy,
      compression blocks, local-variance frequency estimate)
    - Dimension and filename heuristics
    - Optional Reality Defender API result
    """

    def __init__(self, detection_config: Optional[DetectionConfig] = None):
        """
        Initialize the detector.

        Args:
            detection_config: Immutable configuration (defaults to local-only)
        """
        self.config = detection_config or DetectionConfig()
        self.external_detector = None

        if self.config.external_enabled:
            self.external_detector = RealityDefenderClient(self.config)

        logger.info(f"HeuristicImageDetector initialized "
                    f"(external: {self.external_enabled}, "
                    f"parallel extraction: {self.config.parallel_extraction})")

    @property
    def external_enabled(self) -> bool:
        """True only when the external client is configured and has an API key."""
        return self.external_detector is not None and self.external_detector.available

    def local_detection(self, buffer: ImageBuffer, filename: str,
                        file_size: int = 0) -> DetectionResult:
        """Run feature extraction and local scoring."""
        features = extract_features(buffer, filename, file_size, self.config)
        ai_score = calculate_ai_score(features, self.config)
        confidence = calculate_local_confidence(features, self.config)

        return DetectionResult(
            method=METHOD_LOCAL,
            ai_score=ai_score,
            confidence=confidence,
            features=features,
            details={
                'smoothness': features.pixel_analysis['smoothness'],
                'noise_level': features.noise_pattern,
                'edge_sharpness': features.edge_analysis['sharpness_ratio'],
                'color_entropy': features.color_distribution['entropy'],
                'dimension_match': features.dimension_analysis['is_standard_ai'],
                'filename_indicator': features.file_name_analysis['indicator'],
                'ai_score': ai_score,
            },
        )

    def _external_detection(self, image_data: bytes, filename: str,
                            content_type: Optional[str]) -> Optional[DetectionResult]:
        if not self.external_enabled:
            return None
        try:
            return self.external_detector.detect(image_data, filename, content_type)
        except ExternalDetectionError as e:
            logger.warning(f"External API detection failed: {e}")
            return None

    def detect_buffer(self, buffer: ImageBuffer, image_data: bytes,
                      filename: str = 'image',
                      content_type: Optional[str] = None) -> DetectionResult:
        """
        Analyze an already decoded image.

        Args:
            buffer: Decoded RGBA pixels
            image_data: Original file bytes (sent to the external API)
            filename: Original filename
            content_type: MIME type of the original file

        Raises:
            DetectionError: on any unexpected failure
        """
        start_time = time.time()

        try:
            local_result = self.local_detection(buffer, filename, len(image_data or b''))
            external_result = self._external_detection(image_data, filename, content_type)
            combined = combine_results(local_result, external_result)
        except Exception as e:
            logger.error(f"Detection error: {e}")
            raise DetectionError('AI detection failed') from e

        analysis_time = (time.time() - start_time) * 1000
        logger.info(f"{filename}: method={combined.method}, ai={combined.is_ai_generated}, "
                    f"confidence={combined.confidence}, time={analysis_time:.1f}ms")

        return dataclasses.replace(combined, analysis_time=analysis_time)

    def detect(self, image_data: bytes, filename: str = 'image',
               content_type: Optional[str] = None) -> DetectionResult:
        """
        Decode and analyze an image.

        Raises:
            ImageDecodeError: if the bytes are not a readable image
            DetectionError: on any unexpected failure after decoding
        """
        buffer = decode_image(image_data)
        return self.detect_buffer(buffer, image_data, filename, content_type)

    def detect_with_fallback(self, image_data: bytes, filename: str = 'image',
                             content_type: Optional[str] = None) -> DetectionResult:
        """
        Like detect(), but a DetectionError degrades to the fallback detector.

        Decode failures still propagate.
        """
        buffer = decode_image(image_data)
        try:
            return self.detect_buffer(buffer, image_data, filename, content_type)
        except DetectionError as e:
            logger.error(f"AI detection failed, using fallback: {e.__cause__}")
            return fallback_detection(buffer, filename)


def create_detector(detection_config: Optional[DetectionConfig] = None) -> HeuristicImageDetector:
    """Factory function; reads the environment when no config is given."""
    return HeuristicImageDetector(detection_config or DetectionConfig.from_env())
