"""
TrueFrame Feature Extractor
Runs every pixel and metadata extractor over one image and assembles the
feature record consumed by the scorers.
"""

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .config import DetectionConfig
from .image_buffer import ImageBuffer
from .metadata_analyzer import analyze_dimensions, analyze_filename
from .pixel_analyzer import (
    analyze_color_distribution,
    analyze_edges,
    analyze_frequency_domain,
    analyze_noise_pattern,
    analyze_pixel_patterns,
    detect_compression_artifacts,
)

logger = logging.getLogger(__name__)

PIXEL_EXTRACTORS: Dict[str, Callable[[ImageBuffer], Dict[str, Any]]] = {
    'pixel_analysis': analyze_pixel_patterns,
    'compression_artifacts': detect_compression_artifacts,
    'color_distribution': analyze_color_distribution,
    'edge_analysis': analyze_edges,
    'noise_pattern': analyze_noise_pattern,
    'frequency_analysis': analyze_frequency_domain,
}


@dataclass(frozen=True)
class ImageFeatures:
    """Feature record for one analysis. Recomputed per image, never persisted."""
    file_name: str
    file_size: int
    width: int
    height: int
    aspect_ratio: float
    pixel_analysis: Dict[str, float]
    compression_artifacts: Dict[str, float]
    color_distribution: Dict[str, Any]
    edge_analysis: Dict[str, Any]
    noise_pattern: Dict[str, float]
    frequency_analysis: Dict[str, float]
    dimension_analysis: Dict[str, Any]
    file_name_analysis: Dict[str, Any]

    def summary(self) -> Dict[str, Any]:
        """Feature record without the raw histograms."""
        color = {k: v for k, v in self.color_distribution.items() if k != 'distribution'}
        return {
            'file_name': self.file_name,
            'file_size': self.file_size,
            'dimensions': {'width': self.width, 'height': self.height},
            'aspect_ratio': self.aspect_ratio,
            'pixel_analysis': self.pixel_analysis,
            'compression_artifacts': self.compression_artifacts,
            'color_distribution': color,
            'edge_analysis': self.edge_analysis,
            'noise_pattern': self.noise_pattern,
            'frequency_analysis': self.frequency_analysis,
            'dimension_analysis': self.dimension_analysis,
            'file_name_analysis': self.file_name_analysis,
        }


def _run_pixel_extractors(buffer: ImageBuffer, parallel: bool) -> Dict[str, Dict[str, Any]]:
    if not parallel:
        return {name: extract(buffer) for name, extract in PIXEL_EXTRACTORS.items()}

    results = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(PIXEL_EXTRACTORS)) as executor:
        future_to_name = {
            executor.submit(extract, buffer): name
            for name, extract in PIXEL_EXTRACTORS.items()
        }
        for future in concurrent.futures.as_completed(future_to_name):
            results[future_to_name[future]] = future.result()
    return results


def extract_features(
    buffer: ImageBuffer,
    filename: str,
    file_size: int = 0,
    detection_config: Optional[DetectionConfig] = None,
) -> ImageFeatures:
    """
    Build the feature record for one image.

    Args:
        buffer: Decoded RGBA pixels
        filename: Original filename (used by the filename heuristics)
        file_size: Size of the original file in bytes
        detection_config: Pattern lists, dimension whitelist and the
            parallel_extraction switch (defaults to DetectionConfig())
    """
    detection_config = detection_config or DetectionConfig()

    pixel = _run_pixel_extractors(buffer, detection_config.parallel_extraction)

    return ImageFeatures(
        file_name=filename,
        file_size=file_size,
        width=buffer.width,
        height=buffer.height,
        aspect_ratio=buffer.width / buffer.height,
        dimension_analysis=analyze_dimensions(
            buffer.width, buffer.height, detection_config.common_dimensions
        ),
        file_name_analysis=analyze_filename(
            filename,
            detection_config.ai_filename_patterns,
            detection_config.real_filename_patterns,
        ),
        **pixel,
    )
