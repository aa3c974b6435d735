"""Endpoints de health check para Cloud Run."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import get_base_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed", "skipped"]
    latency_ms: float | None = None
    error: str | None = None

    @property
    def is_ready(self) -> bool:
        return self.status in {"ok", "degraded", "skipped"}

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=get_base_settings().service_name,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness: verifica os backends que a configuração exige."""
    state = request.app.state
    redis_check, firestore_check = await asyncio.gather(
        _check_redis(
            getattr(state, "redis_client", None),
            required=getattr(state, "redis_required", False),
        ),
        _check_firestore(
            getattr(state, "firestore_client", None),
            required=getattr(state, "firestore_required", False),
        ),
    )

    ready = redis_check.is_ready and firestore_check.is_ready
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "redis": redis_check.as_dict(),
            "firestore": firestore_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _check_redis(redis_client: Any | None, *, required: bool) -> DependencyCheck:
    if redis_client is None:
        if not required:
            return DependencyCheck(status="skipped")
        return DependencyCheck(status="failed", error="not_configured")
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(redis_client.ping(), timeout=2.0)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))


async def _check_firestore(firestore_client: Any | None, *, required: bool) -> DependencyCheck:
    if firestore_client is None:
        if not required:
            return DependencyCheck(status="skipped")
        return DependencyCheck(status="failed", error="not_configured")
    started_at = time.perf_counter()
    try:
        exists = await asyncio.wait_for(
            asyncio.to_thread(_read_firestore_health_doc, firestore_client),
            timeout=3.0,
        )
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    status = "ok" if exists else "degraded"
    return DependencyCheck(status=status, latency_ms=round(latency_ms, 2))


def _read_firestore_health_doc(firestore_client: Any) -> bool:
    doc = firestore_client.collection("_health").document("check").get()
    return bool(getattr(doc, "exists", False))
