"""
Pytest configuration.

Registers the ``integration`` marker / ``--run-integration`` option and
provides fixtures that point the relay at a throwaway upload directory.
"""

import pytest
from src.core.config import settings


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against the real Vision Parser API"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring a real Vision Parser API key"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Isolated upload directory; returns its path so tests can check it is emptied."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(path))
    return path


@pytest.fixture
def relay_settings(upload_dir, monkeypatch):
    """Relay configured with a fake key against the default Vision Parser URL."""
    monkeypatch.setattr(settings, "vision_parser_api_key", "test-key")
    monkeypatch.setattr(settings, "vision_parser_api_url", "https://api.visionparser.com/parse/image/file")
    monkeypatch.setattr(settings, "max_upload_bytes", 10 * 1024 * 1024)
    return settings
