"""
Tests for the sample emitter.
"""
import pytest

from imgmap.emitter import current_millis, iter_samples, send_image
from imgmap.errors import ConfigurationError, TransmissionError
from imgmap.models import PixelGrid

from mocks.mock_sinks import MockSession


TIMESTAMP = 1_700_000_000_000


class TestIterSamples:
    """Tests for per-pixel sample generation."""

    def test_2x2_scan(self, grid_2x2):
        samples = list(iter_samples(grid_2x2, "square.png", TIMESTAMP))

        assert [s.position for s in samples] == ["0", "1", "2", "3"]
        assert [s.value for s in samples] == [10, 20, 30, 40]
        assert {s.timestamp for s in samples} == {TIMESTAMP}
        for s in samples:
            assert s.metric == "pixel"
            assert s.labels["image"] == "square.png"
            assert s.labels["size"] == "2x2"

    def test_reads_column_then_row(self):
        """Row-major scan: a wide grid keeps its rows intact."""
        grid = PixelGrid.from_rows([[1, 2, 3], [4, 5, 6]])
        samples = list(iter_samples(grid, "wide.png", TIMESTAMP))
        assert [s.value for s in samples] == [1, 2, 3, 4, 5, 6]
        assert samples[0].labels["size"] == "3x2"

    def test_positions_unique_and_sorted(self):
        grid = PixelGrid.from_rows([[c + r * 12 for c in range(12)] for r in range(11)])
        positions = [s.position for s in iter_samples(grid, "g.png", TIMESTAMP)]
        assert len(positions) == 132
        assert len(set(positions)) == 132
        assert positions == sorted(positions)
        assert positions[0] == "000"
        assert positions[-1] == "131"

    def test_alpha_encoding(self, grid_2x2):
        samples = list(iter_samples(grid_2x2, "square.png", TIMESTAMP, encoding="alpha"))
        assert [s.position for s in samples] == ["a", "b", "c", "d"]

    @pytest.mark.parametrize("width,height", [(0, 0), (0, 5), (5, 0)])
    def test_empty_grid(self, width, height):
        grid = PixelGrid.empty(width, height)
        assert list(iter_samples(grid, "empty.png", TIMESTAMP)) == []

    def test_requires_image_name(self, grid_2x2):
        with pytest.raises(ValueError):
            list(iter_samples(grid_2x2, "", TIMESTAMP))

    def test_unknown_encoding(self, grid_2x2):
        with pytest.raises(ConfigurationError):
            list(iter_samples(grid_2x2, "square.png", TIMESTAMP, encoding="hex"))

    def test_is_lazy(self):
        grid = PixelGrid.from_rows([[0] * 100] * 100)
        gen = iter_samples(grid, "big.png", TIMESTAMP)
        first = next(gen)
        assert first.position == "0000"


class TestSendImage:
    """Tests for streaming samples into a session."""

    def test_submits_every_pixel(self, grid_2x2, mock_session):
        summary = send_image(grid_2x2, "square.png", mock_session, timestamp=TIMESTAMP)

        assert summary.samples_submitted == 4
        assert summary.size == "2x2"
        assert summary.timestamp == TIMESTAMP
        assert summary.encoding == "decimal"
        assert (summary.first_position, summary.last_position) == ("0", "3")
        assert [s.value for s in mock_session.submitted] == [10, 20, 30, 40]

    def test_streams_in_batches(self, grid_2x2, mock_session):
        send_image(grid_2x2, "square.png", mock_session, timestamp=TIMESTAMP)
        # batch_size=2 flushes as the scan goes; nothing left for close()
        assert len(mock_session.batches) == 2
        assert mock_session.pending == 0
        assert not mock_session.closed

    def test_default_timestamp_shared(self, grid_2x2, mock_session):
        before = current_millis()
        send_image(grid_2x2, "square.png", mock_session)
        after = current_millis()

        stamps = {s.timestamp for s in mock_session.submitted}
        assert len(stamps) == 1
        assert before <= stamps.pop() <= after

    def test_failure_aborts_scan(self, grid_2x2):
        session = MockSession(batch_size=1, fail_after=2)
        with pytest.raises(TransmissionError):
            send_image(grid_2x2, "square.png", session, timestamp=TIMESTAMP)

        assert [s.position for s in session.delivered] == ["0", "1"]

    def test_empty_grid(self, mock_session):
        summary = send_image(PixelGrid.empty(3, 0), "empty.png", mock_session)
        assert summary.samples_submitted == 0
        assert summary.first_position == ""
        assert mock_session.submitted == []
