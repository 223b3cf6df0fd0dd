"""Shared pytest fixtures for BOM intake test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide an API test client with small stream read constraints."""
    from app.core.config import PayloadSettings
    from app.core.config import get_payload_settings
    from app.main import app

    app.dependency_overrides[get_payload_settings] = lambda: PayloadSettings(max_string_length=64, max_nesting_depth=4)
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
