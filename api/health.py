"""
Health checks for LAKECAST API.

The only dependency is the upstream GLOFS frame server; run discovery
for all lakes doubles as its liveness check.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from api.config import settings
from api.state import get_app_state

logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    """Health check status."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of a single component."""
    name: str
    status: HealthStatus
    latency_ms: Optional[float] = None
    message: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"name": self.name, "status": self.status.value}
        if self.latency_ms is not None:
            result["latency_ms"] = self.latency_ms
        if self.message:
            result["message"] = self.message
        if self.details:
            result["details"] = self.details
        return result


def check_glofs_health() -> ComponentHealth:
    """
    Check the GLOFS frame server with latest_run?lake=all.

    Returns:
        ComponentHealth; runs reported per lake in details
    """
    client = get_app_state().client
    if not client.base_url:
        return ComponentHealth(
            name="glofs",
            status=HealthStatus.DEGRADED,
            message="GLOFS_API not configured",
        )

    start = time.perf_counter()
    try:
        runs = client.latest_run("all")
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.error(f"GLOFS health check failed: {e}")
        return ComponentHealth(
            name="glofs",
            status=HealthStatus.UNHEALTHY,
            latency_ms=round(latency_ms, 2),
            message=f"Upstream failed: {type(e).__name__}",
        )

    latency_ms = (time.perf_counter() - start) * 1000
    missing = [lake for lake, run in runs.items() if run is None]
    return ComponentHealth(
        name="glofs",
        status=HealthStatus.DEGRADED if missing else HealthStatus.HEALTHY,
        latency_ms=round(latency_ms, 2),
        message=f"No run for: {', '.join(missing)}" if missing else "Runs available",
        details={"runs": runs},
    )


async def perform_health_check() -> Dict[str, Any]:
    """Aggregate component health into one report."""
    glofs = await asyncio.to_thread(check_glofs_health)
    return {
        "status": glofs.status.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.api_version,
        "components": {"glofs": glofs.to_dict()},
    }
