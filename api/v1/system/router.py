"""
System endpoints
Health check for load balancers and uptime monitors
"""

from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check():
    """
    Liveness only; does not touch the database
    """
    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
