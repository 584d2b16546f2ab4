# routers/health.py

from fastapi import APIRouter

from core.config import settings
from core.logging_config import logger
from core.supabase_client import ping_supabase

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/db
# Reaches each registry table through the anon key
# No auth required
# -----------------------------------------------------
@router.get("/db", summary="Supabase / DB health check")
def health_db():
    """
    Verifies Supabase connectivity table by table.
    Anonymous reads are filtered to nothing by row-level security,
    so rows_found is expected to be 0; an error means the table
    or the endpoint is unreachable.
    """
    try:
        status = ping_supabase()
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "service": "Supabase",
            "status": "error",
            "error": str(e),
        }

    return {
        "service": "Supabase",
        "status": status.get("status", "unknown"),
        "details": status,
    }


# -----------------------------------------------------
# GET /health/app
# -----------------------------------------------------
@router.get("/app", summary="App health check")
def health_app():
    return {
        "service": settings.PROJECT_NAME,
        "env": settings.ENV,
        "status": "ok",
    }
