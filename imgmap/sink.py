"""
Metric Sink - delivery of labeled samples to a time-series backend

A sink hands out sessions. A session buffers submitted samples and sends
them in batches; closing it flushes whatever is left and releases the
connection.

Usage:
    sink = SignalFxSink(SinkConfig.load())
    with sink.create_session() as session:
        session.submit(sample)
"""
import sys
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

from .config import SinkConfig
from .errors import TransmissionError
from .models import LabeledSample


class Session(ABC):
    """
    A single delivery session.

    Subclasses implement the actual transport in _send().
    """

    def __init__(self, name: str, batch_size: int = 300, debug: bool = False):
        self.name = name
        self.batch_size = batch_size
        self.debug = debug
        self._pending: List[LabeledSample] = []
        self._sent = 0
        self._closed = False

    @abstractmethod
    def _send(self, batch: List[LabeledSample]) -> None:
        """Deliver one batch. Raise TransmissionError on failure."""
        pass

    def _release(self) -> None:
        """Release transport resources. Called once from close()."""
        pass

    def submit(self, sample: LabeledSample) -> None:
        """Queue a sample, sending a batch when batch_size is reached."""
        if self._closed:
            raise TransmissionError(f"[{self.name}] Session is closed")
        self._pending.append(sample)
        if len(self._pending) >= self.batch_size:
            self.flush()

    def flush(self) -> None:
        """Send all queued samples."""
        if not self._pending:
            return
        batch, self._pending = self._pending, []
        start_time = time.time()
        self._send(batch)
        self._sent += len(batch)
        self._log(f"Flushed {len(batch)} datapoints in {time.time() - start_time:.2f}s")

    def close(self) -> None:
        """Flush remaining samples and release the session."""
        if self._closed:
            return
        try:
            self.flush()
        finally:
            self._closed = True
            self._release()
            self._log(f"Session closed after {self._sent} datapoints")

    @property
    def sent(self) -> int:
        """Number of samples successfully delivered."""
        return self._sent

    @property
    def pending(self) -> int:
        return len(self._pending)

    @property
    def closed(self) -> bool:
        return self._closed

    def _log(self, message: str) -> None:
        if self.debug:
            print(f"[{self.name}] {message}", file=sys.stderr)

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return
        # Keep the original error; a failing final flush must not mask it.
        try:
            self.close()
        except TransmissionError as close_error:
            self._log(f"Close failed after earlier error: {close_error}")


class MetricSink(ABC):
    """Abstract factory for delivery sessions."""

    @abstractmethod
    def create_session(self) -> Session:
        pass


# =============================================================================
# SignalFx ingest API
# =============================================================================

class SignalFxSession(Session):
    """Posts gauge datapoints as JSON to the SignalFx /v2/datapoint endpoint."""

    def __init__(self, config: SinkConfig, http: Optional[requests.Session] = None):
        super().__init__(name=config.sender, batch_size=config.batch_size, debug=config.debug)
        self.config = config
        self._http = http or requests.Session()
        self._http.headers.update(self._headers())

    def _headers(self) -> Dict[str, str]:
        return {
            "X-SF-Token": self.config.token,
            "Content-Type": "application/json",
            "User-Agent": self.config.sender,
        }

    @staticmethod
    def build_payload(batch: List[LabeledSample]) -> Dict[str, Any]:
        payload: Dict[str, List[Dict[str, Any]]] = {}
        for sample in batch:
            payload.setdefault(sample.metric_type, []).append(sample.to_dict())
        return payload

    def _send(self, batch: List[LabeledSample]) -> None:
        url = self.config.datapoint_url
        try:
            response = self._http.post(
                url,
                json=self.build_payload(batch),
                timeout=self.config.timeout
            )
        except requests.exceptions.RequestException as e:
            raise TransmissionError(f"Error sending datapoints to {url}: {e}") from e

        if not response.ok:
            raise TransmissionError(
                f"Ingest rejected {len(batch)} datapoints: "
                f"HTTP {response.status_code} {response.text[:200]}",
                status_code=response.status_code
            )

    def _release(self) -> None:
        self._http.close()


class SignalFxSink(MetricSink):
    """
    Sink for the SignalFx ingest API.

    Usage:
        sink = SignalFxSink(SinkConfig(token="..."))
    """

    def __init__(self, config: SinkConfig, http_factory=None):
        """
        Args:
            config: Sink settings; validated here
            http_factory: Callable returning a requests.Session (for tests)
        """
        self.config = config.validate()
        self._http_factory = http_factory or requests.Session

    def create_session(self) -> SignalFxSession:
        return SignalFxSession(self.config, http=self._http_factory())
