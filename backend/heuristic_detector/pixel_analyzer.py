"""
TrueFrame Pixel Analyzer
Single-pass statistics over a flat RGBA buffer.

Each extractor is a pure function of an ImageBuffer: none of them mutate
the buffer or share scan state, so they can run in any order or in
parallel. Offsets below are byte offsets into the flat buffer, so a stride
of 16 bytes visits every 4th pixel.

A ratio with nothing to divide by (no samples, no blocks, no red energy)
is reported as None. Scoring rules never fire on a None value.

Extractors:
- analyze_pixel_patterns: smoothness / uniformity / gradient variance
- analyze_noise_pattern: consecutive red-channel deltas
- analyze_edges: 2-tap gradient magnitude over interior pixels
- analyze_color_distribution: per-channel entropy and colorfulness
- detect_compression_artifacts: 64-pixel block variance and quantization
- analyze_frequency_domain: local-variance energy split (not an FFT)
"""

import logging
from typing import Any, Dict, Optional

import cv2
import numpy as np

from . import config
from .image_buffer import ImageBuffer

logger = logging.getLogger(__name__)


def _safe_ratio(numerator: float, denominator: float) -> Optional[float]:
    """numerator / denominator, or None when there is nothing to divide by."""
    return float(numerator) / denominator if denominator else None


def _sample_offsets(length: int, lookahead: int) -> np.ndarray:
    """Offsets 0, 16, 32, ... whose lookahead byte is still inside the buffer."""
    offsets = np.arange(0, length, config.PIXEL_SAMPLE_STRIDE)
    return offsets[offsets + lookahead < length]


def analyze_pixel_patterns(buffer: ImageBuffer) -> Dict[str, float]:
    """
    Smoothness and uniformity over every 4th pixel.

    Each sample is compared with the pixel immediately before it in the
    buffer (the first sample is compared with itself). Counts are normalized
    by the number of samples taken, not by the total pixel count.
    """
    data = buffer.data.astype(np.int16)
    offsets = _sample_offsets(data.size, 12)
    samples = offsets.size
    if samples == 0:
        return {'smoothness': None, 'uniformity': None, 'gradient_variance': None}

    previous = np.where(offsets >= 4, offsets - 4, offsets)

    r, g, b = data[offsets], data[offsets + 1], data[offsets + 2]
    diff = (
        np.abs(r - data[previous])
        + np.abs(g - data[previous + 1])
        + np.abs(b - data[previous + 2])
    )

    smooth = np.count_nonzero(diff < config.SMOOTH_DELTA_THRESHOLD)
    uniform = np.count_nonzero(
        (np.abs(r - g) < config.UNIFORM_CHANNEL_TOLERANCE)
        & (np.abs(g - b) < config.UNIFORM_CHANNEL_TOLERANCE)
    )

    return {
        'smoothness': smooth / samples,
        'uniformity': uniform / samples,
        'gradient_variance': float(diff.sum()) / samples,
    }


def analyze_noise_pattern(buffer: ImageBuffer) -> Dict[str, float]:
    """Mean red-channel delta between each sampled pixel and the next one."""
    data = buffer.data.astype(np.int16)
    offsets = _sample_offsets(data.size, 8)
    samples = offsets.size
    if samples == 0:
        return {'average_noise': None, 'high_frequency_ratio': None, 'overall_noise_level': None}

    diff = np.abs(data[offsets] - data[offsets + 4])
    average = float(diff.sum()) / samples

    return {
        'average_noise': average,
        'high_frequency_ratio': np.count_nonzero(diff > config.HIGH_FREQUENCY_NOISE_DELTA) / samples,
        'overall_noise_level': average,
    }


def analyze_edges(buffer: ImageBuffer) -> Dict[str, Any]:
    """
    Gradient magnitude on the red channel for every interior pixel.

    gx = right - left, gy = bottom - top. This is the only full-resolution
    pass over the image.
    """
    width, height = buffer.width, buffer.height
    result = {
        'edge_count': 0,
        'sharp_edges': 0,
        'edge_density': 0.0,
        'sharpness_ratio': 0.0,
        'average_edge_strength': 0.0,
    }
    if width < 3 or height < 3:
        return result

    red = buffer.red.astype(np.float64)
    kernel_x = np.array([[-1.0, 0.0, 1.0]])
    kernel_y = np.array([[-1.0], [0.0], [1.0]])
    gx = cv2.filter2D(red, cv2.CV_64F, kernel_x)
    gy = cv2.filter2D(red, cv2.CV_64F, kernel_y)
    magnitude = cv2.magnitude(gx, gy)[1:-1, 1:-1]

    edges = magnitude[magnitude > config.EDGE_MAGNITUDE_THRESHOLD]
    edge_count = int(edges.size)
    sharp_edges = int(np.count_nonzero(edges > config.SHARP_EDGE_MAGNITUDE_THRESHOLD))

    result.update({
        'edge_count': edge_count,
        'sharp_edges': sharp_edges,
        'edge_density': edge_count / (width * height),
        'sharpness_ratio': sharp_edges / max(edge_count, 1),
        'average_edge_strength': float(edges.mean()) if edge_count else 0.0,
    })
    return result


def calculate_entropy(bins: np.ndarray, total: int) -> float:
    """Shannon entropy (base 2) of a histogram."""
    if total == 0:
        return 0.0
    p = bins[bins > 0] / total
    return float(-(p * np.log2(p)).sum())


def analyze_color_distribution(buffer: ImageBuffer) -> Dict[str, Any]:
    """Per-channel and luma histograms, their entropy, and mean colorfulness."""
    pixels = buffer.data.reshape(-1, 4)
    total = pixels.shape[0]

    r = pixels[:, 0].astype(np.float64)
    g = pixels[:, 1].astype(np.float64)
    b = pixels[:, 2].astype(np.float64)

    # BT.601 luma, rounded half up
    gray = np.floor(0.299 * r + 0.587 * g + 0.114 * b + 0.5).astype(np.int64)
    gray = np.clip(gray, 0, 255)

    distribution = {
        'r': np.bincount(pixels[:, 0], minlength=256),
        'g': np.bincount(pixels[:, 1], minlength=256),
        'b': np.bincount(pixels[:, 2], minlength=256),
        'gray': np.bincount(gray, minlength=256),
    }
    entropy = {name: calculate_entropy(bins, total) for name, bins in distribution.items()}

    rg = r - g
    yb = 0.5 * (r + g) - b
    colorfulness = _safe_ratio(np.sqrt(rg * rg + yb * yb).sum(), total)

    return {
        'entropy': entropy,
        'average_entropy': (entropy['r'] + entropy['g'] + entropy['b']) / 3,
        'colorfulness': colorfulness,
        'distribution': distribution,
    }


def detect_compression_artifacts(buffer: ImageBuffer) -> Dict[str, float]:
    """
    Low-variance and quantized 64-pixel runs of the red channel.

    Blocks start every 256 bytes and are only counted while a full block
    plus at least one byte follows the block start.
    """
    data = buffer.data
    block_bytes = config.COMPRESSION_BLOCK_PIXELS * 4
    starts = np.arange(0, data.size, block_bytes)
    starts = starts[starts + block_bytes < data.size]
    total_blocks = starts.size
    if total_blocks == 0:
        return {'block_artifacts': None, 'quantization_artifacts': None, 'overall_score': None}

    blocks = data[starts[:, None] + 4 * np.arange(config.COMPRESSION_BLOCK_PIXELS)]

    variance = blocks.astype(np.float64).var(axis=1)
    block_artifacts = int(np.count_nonzero(variance < config.BLOCK_VARIANCE_THRESHOLD))

    ordered = np.sort(blocks, axis=1)
    unique_counts = np.count_nonzero(np.diff(ordered, axis=1), axis=1) + 1
    quantization = 1 - unique_counts / config.COMPRESSION_BLOCK_PIXELS
    quantization_artifacts = int(np.count_nonzero(quantization > config.QUANTIZATION_THRESHOLD))

    return {
        'block_artifacts': block_artifacts / total_blocks,
        'quantization_artifacts': quantization_artifacts / total_blocks,
        'overall_score': (block_artifacts + quantization_artifacts) / (2 * total_blocks),
    }


def analyze_frequency_domain(buffer: ImageBuffer) -> Dict[str, float]:
    """
    Coarse high/low "frequency" split.

    A grid is sampled every max(1, width // 32) pixels. Each sample's red
    intensity goes to the high-frequency accumulator when the 3x3 variance
    around it (clipped at the borders) exceeds the threshold, otherwise to
    the low-frequency one.
    """
    step = max(1, buffer.width // config.FREQUENCY_GRID_DIVISOR)
    red = buffer.red.astype(np.float64)

    def window_sum(values):
        return cv2.boxFilter(values, -1, (3, 3), normalize=False,
                             borderType=cv2.BORDER_CONSTANT)

    counts = window_sum(np.ones_like(red))[::step, ::step]
    sums = window_sum(red)[::step, ::step]
    squares = window_sum(red * red)[::step, ::step]
    intensity = red[::step, ::step]

    # variance > t  <=>  n*sum(x^2) - sum(x)^2 > t*n^2 (exact on integer sums)
    is_high = counts * squares - sums * sums > config.LOCAL_VARIANCE_THRESHOLD * counts * counts

    high = float(intensity[is_high].sum())
    low = float(intensity[~is_high].sum())
    total = high + low

    return {
        'high_frequency_ratio': _safe_ratio(high, total),
        'low_frequency_ratio': _safe_ratio(low, total),
        'frequency_balance': high / max(low, 1),
    }
