"""Health checks and monitoring endpoints"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from atlas.config.celery_config import celery_app
from atlas.config.database import get_db
from atlas.config.settings import get_settings

health_router = APIRouter()


@health_router.get("/")
def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "atlas-scheduling"}


@health_router.get("/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """Detailed health check with dependencies"""
    checks = {
        "api": "healthy",
        "database": "unknown",
        "broker": "unknown",
        "overall": "unknown"
    }

    # Check database
    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except SQLAlchemyError as e:
        checks["database"] = f"unhealthy: {str(e)}"

    # Check Celery broker; eager mode never talks to it
    if get_settings().CELERY_TASK_ALWAYS_EAGER:
        checks["broker"] = "skipped"
    else:
        try:
            with celery_app.connection_for_write() as conn:
                conn.ensure_connection(max_retries=1)
            checks["broker"] = "healthy"
        except Exception as e:
            checks["broker"] = f"unhealthy: {str(e)}"

    # Overall status
    if all(status in ("healthy", "skipped") for status in checks.values() if status != "unknown"):
        checks["overall"] = "healthy"
    else:
        checks["overall"] = "degraded"

    return checks
