"""
Shared pytest fixtures for LAKECAST tests.

HTTP traffic to the frame server is intercepted with the requests-mock
``requests_mock`` fixture; nothing leaves the process.
"""

import os

import pytest

# ---------------------------------------------------------------------------
# Section 1: Environment setup (before ANY api.* imports)
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("GLOFS_API", "")

BASE_URL = "http://glofs.test:2153"
RUN_ID = "2025-08-14T12:00:00Z"
ERIE_BBOX = (-83.5, 41.3, -78.8, 42.9)
ERIE_BBOX_PARAM = ",".join(str(v) for v in ERIE_BBOX)
VALID_TIME = "2025-08-15T12:00:00Z"  # RUN_ID + 24 h


# ---------------------------------------------------------------------------
# Section 2: Frame payload builders
# ---------------------------------------------------------------------------

def make_frame_payload(
    lake="leofs",
    run=RUN_ID,
    time="2025-08-15T12:00:00Z",
    dx=0.1,
    dy=0.1,
    wind=None,
    curr=None,
    temp=None,
):
    """Frame in the frame server's wire shape."""
    if wind is None:
        wind = [
            {"lon": -83.0, "lat": 41.5, "u": 3.0, "v": 4.0},
            {"lon": -82.5, "lat": 41.8, "u": -1.0, "v": 2.0},
            {"lon": -81.0, "lat": 42.0, "u": 0.5, "v": -0.5},
        ]
    if curr is None:
        curr = [
            {"lon": -83.0, "lat": 41.5, "u": 0.1, "v": 0.05},
            {"lon": -82.0, "lat": 42.1, "u": -0.2, "v": 0.0},
        ]
    if temp is None:
        temp = [
            {"lon": -83.0, "lat": 41.5, "value": 21.5},
            {"lon": -82.9, "lat": 41.6, "value": 21.0},
            {"lon": -80.0, "lat": 42.5, "value": 19.0},
            {"lon": -79.0, "lat": 42.8, "value": 18.5},
        ]
    return {
        "meta": {
            "lake": lake,
            "run": run,
            "tag": "nowcast+forecast",
            "units": {"wind": "m/s", "curr": "m/s", "temp": "°C"},
        },
        "time": time,
        "dxDeg": dx,
        "dyDeg": dy,
        "wind": wind,
        "curr": curr,
        "temp": temp,
    }


@pytest.fixture
def frame_payload():
    return make_frame_payload()


@pytest.fixture
def make_frame():
    """Factory for frame payloads with overridable fields."""
    return make_frame_payload


# ---------------------------------------------------------------------------
# Section 3: Client fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def glofs_client():
    """GLOFS client pointed at the mocked frame server."""
    from lakecast.glofs.client import GlofsClient

    return GlofsClient(base_url=BASE_URL)


@pytest.fixture
def api_client(glofs_client):
    """FastAPI TestClient with the GLOFS client swapped for the test one."""
    from fastapi.testclient import TestClient

    from api.main import app
    from api.state import get_app_state, reset_app_state

    reset_app_state()
    get_app_state().set_client(glofs_client)
    with TestClient(app) as test_client:
        yield test_client
    reset_app_state()
