"""Errors raised by the heuristic detector."""


class DetectorError(Exception):
    """Base class for detector failures."""


class ImageDecodeError(DetectorError):
    """The uploaded bytes could not be decoded into an RGBA buffer."""


class ExternalDetectionError(DetectorError):
    """The external detection API is unavailable or returned an unusable reply."""


class DetectionError(DetectorError):
    """Unexpected failure during feature extraction or scoring."""
