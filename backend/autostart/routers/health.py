"""
Health check router for liveness, readiness and autostart status.
"""
from fastapi import APIRouter, Request, status

from autostart.database.connections import get_mongo_client

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if the API is running.
    """
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check with dependencies",
)
async def readiness_check():
    """
    Readiness check that verifies the MongoDB connection.
    """
    checks = {
        "api": "healthy",
        "mongodb": "unknown",
    }

    try:
        client = await get_mongo_client()
        await client.admin.command("ping")
        checks["mongodb"] = "healthy"
    except Exception as e:
        checks["mongodb"] = f"unhealthy: {str(e)}"

    all_healthy = all(v == "healthy" for v in checks.values())

    return {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
    }


@router.get(
    "/health/autostart",
    status_code=status.HTTP_200_OK,
    summary="Result of the last startup trigger run",
)
async def autostart_status(request: Request):
    """
    Report of the XQuery startup trigger.
    Status is "pending" until the trigger has completed a run.
    """
    trigger = getattr(request.app.state, "autostart_trigger", None)
    report = trigger.last_report if trigger is not None else None

    if report is None:
        return {"status": "pending", "report": None}

    return {
        "status": "degraded" if report.failed else "completed",
        "report": report.summary(),
    }
