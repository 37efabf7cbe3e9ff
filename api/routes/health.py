"""Health and observability routes."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.health import Status
from utils.timestamp import format_timestamp

router = APIRouter(prefix="/api/v1", tags=["health"])

# These will be set by app.py
_generators = None
_health_checker = None


def init(generators, health_checker):
    """Initialize with generator and health checker references."""
    global _generators, _health_checker
    _generators = generators
    _health_checker = health_checker


@router.get("/health")
async def health():
    """Health check with component status."""
    report = await _health_checker.check()
    status_code = 200 if report.status != Status.FAIL else 503
    return JSONResponse(content=report.to_dict(), status_code=status_code)


@router.get("/heartbeat")
async def heartbeat():
    """Lightweight heartbeat for frequent polling."""
    snowflake = _generators.snowflake
    return {
        "status": "ok",
        "timestamp": format_timestamp(),
        "uptime_s": round(_health_checker.uptime, 1),
        "worker_id": snowflake.identity.worker_id,
        "datacenter_id": snowflake.identity.datacenter_id,
        "last_time_ms": snowflake.sequencer.state.last_time_ms,
    }
