"""
Error types for imgmap.

Library code raises these; only the CLI turns them into an exit status.
"""
from typing import Optional


class ImgMapError(Exception):
    """Base class for all imgmap errors."""


class ArgumentError(ImgMapError):
    """Command line arguments are missing or invalid."""


class ConfigurationError(ImgMapError):
    """Sink configuration is malformed or incomplete."""


class DecodeError(ImgMapError):
    """An image file could not be decoded into a pixel grid."""

    def __init__(self, path, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Failed to read image file {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TransmissionError(ImgMapError):
    """The metric sink failed to deliver a batch of datapoints."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
