"""
Shared pytest fixtures for the test suite. It includes:
- A fake driver capability with fixed screen measurements.
- Session and classifier client fixtures bound to a local server URL.
- A helper that builds context-managed HTTP response mocks.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional
from unittest.mock import MagicMock, Mock

import pytest

# Add project root to sys.path for imports (avoid changing CWD)
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from ai_locator.capability import DriverCapability
from ai_locator.classifier_client import ClassifierClient
from ai_locator.session import Session

SERVER_URL = "http://classifier.local"
API_KEY = "test_key_12345"
RUN_ID = "run-0001"


def make_response(
    payload: Optional[Dict[str, Any]] = None,
    status_error: Optional[Exception] = None,
    json_error: Optional[Exception] = None
) -> MagicMock:
    """Build a mock requests.Response usable as a context manager."""
    response = MagicMock()
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    else:
        response.raise_for_status.return_value = None
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def capability() -> Mock:
    """Driver capability for a 1080px screenshot of a 360pt wide window."""
    cap = Mock(spec=DriverCapability)
    cap.capture_screenshot_pixel_width.return_value = 1080
    cap.get_window_logical_width.return_value = 360
    cap.capture_screenshot_base64.return_value = "c2NyZWVuc2hvdA=="
    cap.capture_page_source.return_value = "<hierarchy/>"
    return cap


@pytest.fixture
def session() -> Session:
    return Session(api_key=API_KEY, server_url=SERVER_URL, multiplier=3.0, run_id=RUN_ID)


@pytest.fixture
def client(session: Session, capability: Mock):
    c = ClassifierClient(session, capability)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def found_payload() -> Dict[str, Any]:
    return {
        "success": True,
        "key": "key-42",
        "elem": {"x": 300, "y": 600, "width": 90, "height": 60, "text": "Log in", "class": "android.widget.Button"},
    }
