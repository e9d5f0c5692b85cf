"""
Configuration for the Heuristic Detector module.

All thresholds are fixed constants. The external API settings are read from
the environment (or a .env file) once, into an immutable DetectionConfig.
"""
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

# Pixel pattern analysis
SMOOTH_DELTA_THRESHOLD = 10       # Summed RGB delta below this is "smooth"
UNIFORM_CHANNEL_TOLERANCE = 5     # |R-G| and |G-B| below this is "uniform"
PIXEL_SAMPLE_STRIDE = 16          # Bytes between samples (every 4th pixel)

# Noise analysis
HIGH_FREQUENCY_NOISE_DELTA = 20

# Edge analysis
EDGE_MAGNITUDE_THRESHOLD = 30
SHARP_EDGE_MAGNITUDE_THRESHOLD = 100

# Compression artifacts (64 pixels = 256 bytes per block)
COMPRESSION_BLOCK_PIXELS = 64
BLOCK_VARIANCE_THRESHOLD = 50
QUANTIZATION_THRESHOLD = 0.7

# Frequency estimate (local variance proxy, not a transform)
FREQUENCY_GRID_DIVISOR = 32
LOCAL_VARIANCE_THRESHOLD = 100

# Score rules
SMOOTHNESS_THRESHOLD = 0.7
NOISE_THRESHOLD = 5
EDGE_SHARPNESS_RATIO = 0.3
COLOR_ENTROPY_THRESHOLD = 7.5
COMPRESSION_ARTIFACT_THRESHOLD = 0.6
FREQUENCY_HIGH_RATIO_THRESHOLD = 0.3
AI_VERDICT_THRESHOLD = 50

# Confidence rules
CONFIDENCE_BASE = 60
CONFIDENCE_MIN = 65
CONFIDENCE_MAX = 98
HIGH_SMOOTHNESS_THRESHOLD = 0.8

# Result combination
LOCAL_WEIGHT = 0.4
EXTERNAL_WEIGHT = 0.6

# Known generator output sizes (width, height)
COMMON_AI_DIMENSIONS: Tuple[Tuple[int, int], ...] = (
    (512, 512), (1024, 1024), (2048, 2048),
    (512, 768), (768, 512), (1024, 1536),
)

# Filename patterns (matched as case-insensitive substrings)
AI_FILENAME_PATTERNS: Tuple[str, ...] = (
    'generated', 'ai', 'synthetic', 'artificial',
    'midjourney', 'dalle', 'stable', 'aigen',
)
REAL_FILENAME_PATTERNS: Tuple[str, ...] = (
    'photo', 'camera', 'og', 'original', 'real', 'authentic',
)

# Hard overrides applied after the additive score pass
AI_OVERRIDE_TOKEN = 'aigen'
AI_OVERRIDE_SCORE = 95
REAL_OVERRIDE_TOKEN = 'og'
REAL_OVERRIDE_SCORE = 5

# Reality Defender API (free tier: 50 scans/month)
REALITY_DEFENDER_ENDPOINT = 'https://api.realitydefender.com/v1/detect'
REQUEST_TIMEOUT = 30  # Seconds to wait for the external API

# Upload limits for the HTTP API
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tif', '.tiff'}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class DetectionConfig:
    """
    Immutable detector configuration.

    Passed into HeuristicImageDetector at construction; there are no
    process-wide toggles.
    """
    smoothness_threshold: float = SMOOTHNESS_THRESHOLD
    noise_threshold: float = NOISE_THRESHOLD
    edge_sharpness_ratio: float = EDGE_SHARPNESS_RATIO
    color_entropy_threshold: float = COLOR_ENTROPY_THRESHOLD
    compression_artifact_threshold: float = COMPRESSION_ARTIFACT_THRESHOLD
    frequency_high_ratio_threshold: float = FREQUENCY_HIGH_RATIO_THRESHOLD

    confidence_base: int = CONFIDENCE_BASE
    confidence_min: int = CONFIDENCE_MIN
    confidence_max: int = CONFIDENCE_MAX
    high_smoothness_threshold: float = HIGH_SMOOTHNESS_THRESHOLD

    common_dimensions: Tuple[Tuple[int, int], ...] = COMMON_AI_DIMENSIONS
    ai_filename_patterns: Tuple[str, ...] = AI_FILENAME_PATTERNS
    real_filename_patterns: Tuple[str, ...] = REAL_FILENAME_PATTERNS

    external_enabled: bool = False
    external_api_key: Optional[str] = field(default=None, repr=False)
    external_endpoint: str = REALITY_DEFENDER_ENDPOINT
    external_timeout: Optional[float] = REQUEST_TIMEOUT

    parallel_extraction: bool = False

    @classmethod
    def from_env(cls) -> 'DetectionConfig':
        """Build a config from REALITY_DEFENDER_* / DETECTOR_* environment variables."""
        timeout = os.getenv('REALITY_DEFENDER_TIMEOUT')
        return cls(
            external_enabled=_env_flag('REALITY_DEFENDER_ENABLED'),
            external_api_key=os.getenv('REALITY_DEFENDER_API_KEY') or None,
            external_endpoint=os.getenv('REALITY_DEFENDER_ENDPOINT', REALITY_DEFENDER_ENDPOINT),
            external_timeout=float(timeout) if timeout else REQUEST_TIMEOUT,
            parallel_extraction=_env_flag('DETECTOR_PARALLEL_EXTRACTION'),
        )
