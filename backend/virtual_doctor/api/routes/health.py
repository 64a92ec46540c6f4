"""
Health check endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from virtual_doctor.core.config import get_settings
from virtual_doctor.core.conversation_store import (ConversationStore,
                                                    get_conversation_store)
from virtual_doctor.core.database import get_db
from virtual_doctor.core.logging_config import LoggingConfig
from virtual_doctor.utils.datetime_utils import utc_now

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """
    Basic health check endpoint

    Returns:
        dict: Health status
    """
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": get_settings().app_name,
    }


@router.get("/health/detailed")
async def detailed_health_check(
    db: Session = Depends(get_db),
    store: ConversationStore = Depends(get_conversation_store),
):
    """
    Detailed health check with component status

    Returns:
        dict: Detailed health status of all components
    """
    settings = get_settings()
    health_status = {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": settings.app_name,
        "version": "0.1.0",
        "environment": settings.app_env,
        "components": {}
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["components"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["components"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}",
            "error": type(e).__name__
        }

    health_status["components"]["conversations"] = {
        "status": "healthy",
        "active_sessions": len(store),
    }

    return health_status
