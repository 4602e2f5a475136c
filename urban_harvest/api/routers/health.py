# urban_harvest/api/routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {
        "status": "OK",
        "message": "Urban Harvest Hub API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
