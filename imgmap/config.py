"""
Sink Configuration

Settings for the metric sink: where to send datapoints, how to
authenticate, and how to batch them.

Priority (highest to lowest):
1. Environment variables (IMGMAP_*), including ones loaded from a .env file
2. Config file (~/.imgmap/config.json, or the path in IMGMAP_CONFIG)
3. Default values

Usage:
    from imgmap.config import SinkConfig

    config = SinkConfig.load()
    config.validate()
"""
import os
import json
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from dotenv import find_dotenv, load_dotenv

from .encoders import DEFAULT_ENCODING, get_encoder
from .errors import ConfigurationError


ENV_PREFIX = "IMGMAP_"
DEFAULT_CONFIG_FILE = "~/.imgmap/config.json"

DEFAULT_ENDPOINT = "https://ingest.signalfx.com"
DEFAULT_SENDER = "PixelSender"

STRING_SETTINGS = ("endpoint", "token", "sender", "position_encoding")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


@dataclass
class SinkConfig:
    """Configuration for the metric sink."""
    endpoint: str = DEFAULT_ENDPOINT
    token: str = ""
    sender: str = DEFAULT_SENDER
    batch_size: int = 300
    timeout: float = 30.0
    position_encoding: str = DEFAULT_ENCODING
    debug: bool = False

    @property
    def datapoint_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/v2/datapoint"

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, config_file: Optional[str] = None, use_dotenv: bool = True) -> "SinkConfig":
        """
        Build a config from defaults, config file and environment.

        Args:
            config_file: JSON config path (defaults to IMGMAP_CONFIG or ~/.imgmap/config.json)
            use_dotenv: Load a .env file from the working directory first

        Returns:
            SinkConfig (not yet validated)
        """
        if use_dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        values: Dict[str, Any] = {}

        path = config_file or os.getenv(f"{ENV_PREFIX}CONFIG") or DEFAULT_CONFIG_FILE
        values.update(cls._read_file(Path(path).expanduser(), required=config_file is not None))
        values.update(cls._read_environment())

        return cls.from_dict(values)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SinkConfig":
        """Create from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        for key in STRING_SETTINGS:
            if key in data and not isinstance(data[key], str):
                raise ConfigurationError(
                    f"Setting {key!r} must be a string, got {type(data[key]).__name__}"
                )
        config = cls(**{k: v for k, v in data.items() if k in known})
        try:
            config.batch_size = int(config.batch_size)
            config.timeout = float(config.timeout)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e
        if isinstance(config.debug, str):
            config.debug = _parse_bool(config.debug)
        return config

    @staticmethod
    def _read_file(path: Path, required: bool = False) -> Dict[str, Any]:
        if not path.exists():
            if required:
                raise ConfigurationError(f"Config file not found: {path}")
            return {}
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not read config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")
        return data

    @staticmethod
    def _read_environment() -> Dict[str, Any]:
        values = {}
        for f in fields(SinkConfig):
            raw = os.getenv(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is not None:
                values[f.name] = raw
        return values

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> "SinkConfig":
        """Raise ConfigurationError if the config cannot be used to send data."""
        parsed = urlparse(self.endpoint or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(f"Bad ingest URL: {self.endpoint!r}")
        try:
            parsed.port
        except ValueError:
            raise ConfigurationError(f"Bad port in ingest URL: {self.endpoint!r}") from None

        if not self.token or not self.token.strip():
            raise ConfigurationError(
                f"No ingest token configured (set {ENV_PREFIX}TOKEN)"
            )
        if not self.sender:
            raise ConfigurationError("Sender name must not be empty")
        if self.batch_size < 1:
            raise ConfigurationError(f"batch_size must be positive, got {self.batch_size}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

        get_encoder(self.position_encoding)
        return self

    def to_dict(self, redact: bool = True) -> Dict[str, Any]:
        data = asdict(self)
        if redact and data["token"]:
            data["token"] = "***"
        return data
