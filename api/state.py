"""
Shared state for LAKECAST API.

Holds the GLOFS client used by every request. Access goes through a
lock so tests (or an admin hook) can swap the client while requests are
in flight.
"""
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from lakecast.glofs.client import GlofsClient

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Process-wide service state."""
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _client: Optional[GlofsClient] = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def client(self) -> GlofsClient:
        """GLOFS client, created from environment settings on first use."""
        with self._lock:
            if self._client is None:
                self._client = GlofsClient()
                logger.info(f"GLOFS client initialised for '{self._client.base_url or '(same origin)'}'")
            return self._client

    def set_client(self, client: GlofsClient):
        with self._lock:
            self._client = client


_app_state: Optional[AppState] = None
_state_lock = threading.Lock()


def get_app_state() -> AppState:
    """Get the process-wide AppState singleton."""
    global _app_state
    with _state_lock:
        if _app_state is None:
            _app_state = AppState()
        return _app_state


def reset_app_state():
    """Drop the singleton (tests)."""
    global _app_state
    with _state_lock:
        _app_state = None
