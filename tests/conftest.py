"""Pytest fixtures for TopstepX client tests"""

import json
import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# =============================================================================
# Global Test Setup
# =============================================================================

# Add src to Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Load environment variables from .env file for integration tests
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

from topstepx.domain.models import Credentials  # noqa: E402

_FIXTURE_CACHE: dict[str, object] = {}


def _cached_fixture_load(fixtures_dir: Path, filename: str) -> object:
    """Load and cache fixture files to avoid repeated file I/O."""
    cache_key = str(fixtures_dir / "gateway_responses" / filename)
    if cache_key not in _FIXTURE_CACHE:
        with open(cache_key) as f:
            _FIXTURE_CACHE[cache_key] = json.load(f)
    return _FIXTURE_CACHE[cache_key]


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Return path to test fixtures directory"""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def load_fixture(fixtures_dir):
    """Helper to load JSON response fixtures.

    Returns a deep copy so tests may mutate the result freely.
    """

    def _load(filename: str):
        return json.loads(json.dumps(_cached_fixture_load(fixtures_dir, filename)))

    return _load


@pytest.fixture
def credentials() -> Credentials:
    """Dummy API-key credentials"""
    return Credentials(user_name="trader@example.com", api_key="test-api-key")
