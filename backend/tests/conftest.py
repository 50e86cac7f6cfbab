import sys
import pathlib

import pytest
from fastapi.testclient import TestClient

# Ensure backend root (containing the 'version_watch' package) is on sys.path
BACKEND_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from version_watch.core.compat import parse_range
from version_watch.core.config import settings
from version_watch.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def served_version():
    """Temporarily override the version reported by the server."""
    original = settings.version

    def _set(value: str) -> str:
        settings.version = value
        return value

    yield _set
    settings.version = original


@pytest.fixture
def default_constraint():
    return parse_range(">=0.1.0")
