"""Health check endpoints for promptcanvas.

Provides /health and /ready endpoints for container orchestration
and load balancer health checks.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, ClassVar

from litestar import Controller, get

from promptcanvas.core.config import OracleConfig
from promptcanvas.services.canvas import CanvasService


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of an individual component."""

    name: str
    status: HealthStatus
    message: str | None = None
    latency_ms: float | None = None


@dataclass
class HealthResponse:
    """Health check response."""

    status: HealthStatus
    version: str = "0.1.0"
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    components: list[ComponentHealth] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "version": self.version,
            "timestamp": self.timestamp,
            "components": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "latency_ms": c.latency_ms,
                }
                for c in self.components
            ],
        }


class HealthController(Controller):
    """Health check controller.

    Provides endpoints for liveness and readiness probes used by
    container orchestration systems like Kubernetes.
    """

    path = ""
    include_in_schema: ClassVar[bool] = True
    tags: ClassVar[list[str]] = ["Health"]

    @get("/health")
    async def health(self, service: CanvasService, oracle_config: OracleConfig) -> dict[str, Any]:
        """Liveness probe endpoint.

        The application stays healthy without an oracle key; commands then
        answer with a degraded interpretation, so the oracle only degrades
        the overall status.

        Returns:
            Health status with component details.
        """
        components = [
            ComponentHealth(
                name="application",
                status=HealthStatus.HEALTHY,
                message="Application is running",
            ),
            await self._check_storage(service),
            self._check_oracle(oracle_config),
        ]

        statuses = [c.status for c in components]
        if HealthStatus.UNHEALTHY in statuses:
            overall_status = HealthStatus.UNHEALTHY
        elif HealthStatus.DEGRADED in statuses:
            overall_status = HealthStatus.DEGRADED
        else:
            overall_status = HealthStatus.HEALTHY

        return HealthResponse(status=overall_status, components=components).to_dict()

    @get("/ready")
    async def ready(self, service: CanvasService) -> dict[str, Any]:
        """Readiness probe endpoint.

        Indicates if the application is ready to receive traffic.

        Returns:
            Readiness status with individual check results.
        """
        checks = {
            "application": True,
            "storage": (await self._check_storage(service)).status == HealthStatus.HEALTHY,
        }
        return {
            "ready": all(checks.values()),
            "timestamp": datetime.now(UTC).isoformat(),
            "checks": checks,
        }

    async def _check_storage(self, service: CanvasService) -> ComponentHealth:
        """Check that the record store answers."""
        try:
            start = time.perf_counter()
            shapes = await service.list_shapes()
            latency = (time.perf_counter() - start) * 1000
        except Exception as e:  # noqa: BLE001
            return ComponentHealth(
                name="storage",
                status=HealthStatus.UNHEALTHY,
                message=f"Storage error: {e!s}",
            )
        return ComponentHealth(
            name="storage",
            status=HealthStatus.HEALTHY,
            message=f"{len(shapes)} shapes on canvas",
            latency_ms=round(latency, 2),
        )

    def _check_oracle(self, config: OracleConfig) -> ComponentHealth:
        """Report whether an oracle key is configured; no request is made."""
        if config.enabled:
            return ComponentHealth(name="oracle", status=HealthStatus.HEALTHY, message=config.model)
        return ComponentHealth(name="oracle", status=HealthStatus.DEGRADED, message="No API key configured")
