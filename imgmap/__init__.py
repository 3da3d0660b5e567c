"""
imgmap - Image to Heat Map

Sends an image to a time-series backend as one gauge datapoint per pixel,
so a heat-map chart can render it.
"""

from .config import SinkConfig
from .emitter import iter_samples, send_image
from .errors import (
    ImgMapError, ArgumentError, ConfigurationError, DecodeError, TransmissionError
)
from .image import decode
from .models import PixelGrid, LabeledSample, RunSummary
from .sink import MetricSink, Session, SignalFxSink

__all__ = [
    "SinkConfig",
    "iter_samples",
    "send_image",
    "decode",
    "PixelGrid",
    "LabeledSample",
    "RunSummary",
    "MetricSink",
    "Session",
    "SignalFxSink",
    "ImgMapError",
    "ArgumentError",
    "ConfigurationError",
    "DecodeError",
    "TransmissionError",
]
