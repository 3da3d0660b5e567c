"""
Pytest configuration and fixtures for imgmap tests.

Two test tiers:
1. Mock tests (fast, no network) - run with: pytest -m "not requires_api"
2. Live ingest tests - run with: IMGMAP_TOKEN=... pytest -m requires_api
"""
import os
import sys
import pytest
from pathlib import Path

from PIL import Image

TEST_DIR = Path(__file__).parent
sys.path.insert(0, str(TEST_DIR))

from imgmap.config import SinkConfig
from imgmap.models import PixelGrid
from mocks.mock_sinks import MockSession, MockSink


def pytest_configure(config):
    config.addinivalue_line("markers", "requires_api: needs a live ingest endpoint and token")


def pytest_collection_modifyitems(config, items):
    has_token = bool(os.getenv("IMGMAP_TOKEN"))
    for item in items:
        if "requires_api" in item.keywords and not has_token:
            item.add_marker(pytest.mark.skip(reason="IMGMAP_TOKEN not set"))


def pytest_report_header(config):
    status = "set" if os.getenv("IMGMAP_TOKEN") else "not set"
    return [f"imgmap - IMGMAP_TOKEN {status}"]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment without IMGMAP_* settings and no user config file."""
    for key in list(os.environ):
        if key.startswith("IMGMAP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("IMGMAP_CONFIG", str(tmp_path / "missing.json"))
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def grid_2x2():
    """The 2x2 grid [[10, 20], [30, 40]]."""
    return PixelGrid.from_rows([[10, 20], [30, 40]])


@pytest.fixture
def mock_session():
    return MockSession(batch_size=2)


@pytest.fixture
def mock_sink(mock_session):
    return MockSink(mock_session)


@pytest.fixture
def sink_config():
    return SinkConfig(
        endpoint="https://ingest.example.com",
        token="test-token",
        batch_size=2,
        timeout=5
    )


@pytest.fixture
def make_image(tmp_path):
    """Write an RGB image from nested (r, g, b) rows and return its path."""
    def _make(rows, name="image.png"):
        height = len(rows)
        width = len(rows[0]) if rows else 0
        img = Image.new("RGB", (width, height))
        img.putdata([pixel for row in rows for pixel in row])
        path = tmp_path / name
        img.save(path)
        return path
    return _make
