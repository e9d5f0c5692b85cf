"""
TrueFrame External Detector
Optional Reality Defender API client.

Sends the original file as multipart form data and normalizes the reply
into the same DetectionResult shape as local detection. Every failure is
raised as ExternalDetectionError; the caller decides to fall back to the
local result. There is no retry.
"""

import logging
from typing import Optional

import requests

from .config import DetectionConfig
from .exceptions import ExternalDetectionError
from .results import METHOD_REALITY_DEFENDER, DetectionResult, round_half_up

logger = logging.getLogger(__name__)


class RealityDefenderClient:
    """Thin wrapper around the Reality Defender detection endpoint."""

    def __init__(self, detection_config: DetectionConfig):
        self.api_key = detection_config.external_api_key
        self.endpoint = detection_config.external_endpoint
        self.timeout = detection_config.external_timeout
        self.available = self.api_key is not None

        if not self.available:
            logger.warning("REALITY_DEFENDER_API_KEY not set. External detection disabled.")

    def detect(self, image_data: bytes, filename: str = 'image',
               content_type: Optional[str] = None) -> DetectionResult:
        """
        Score an image with the external API.

        Expects a JSON body with `score` in [0, 1] and optional `details`.

        Raises:
            ExternalDetectionError: missing key, transport error, non-2xx
                status or a malformed reply.
        """
        if not self.available:
            raise ExternalDetectionError('Reality Defender API key not configured')

        headers = {'Authorization': f'Bearer {self.api_key}'}
        file_field = (filename, image_data, content_type or 'application/octet-stream')

        try:
            response = requests.post(
                self.endpoint,
                headers=headers,
                files={'file': file_field},
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise ExternalDetectionError(f'API request failed: {e}') from e

        if not response.ok:
            raise ExternalDetectionError(f'API request failed: {response.status_code}')

        try:
            payload = response.json()
            score = float(payload['score'])
        except (ValueError, KeyError, TypeError) as e:
            raise ExternalDetectionError(f'Unexpected API response: {e}') from e

        logger.info(f"Reality Defender score for {filename}: {score:.3f}")

        # Out-of-range scores are kept in raw_score only
        bounded = max(0.0, min(1.0, score))

        return DetectionResult(
            method=METHOD_REALITY_DEFENDER,
            ai_score=bounded * 100,
            confidence=round_half_up(bounded * 100),
            raw_score=score,
            details=payload.get('details') or {},
        )
