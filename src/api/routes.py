"""Health endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pymongo.errors import PyMongoError

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Health check endpoint.

    Returns:
        Status, database reachability and timestamp in ISO8601 format
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        await request.app.state.mongo_client.admin.command("ping")
        health_status["database"] = "healthy"
    except PyMongoError:
        health_status["database"] = "unhealthy"

    return health_status
