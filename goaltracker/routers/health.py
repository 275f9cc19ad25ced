from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Report service and database status."""
    db_health = request.app.state.database_service.health_check()
    healthy = db_health.get("status") == "healthy"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "database": db_health,
        },
    )
