"""
Health check handler for the app.
"""
import logging

from sqlalchemy import text

from helpers import ResponseHelper
from models import db

logger = logging.getLogger(__name__)


class HealthHandler:
    @staticmethod
    def check_health():
        try:
            db.session.execute(text("SELECT 1"))
        except Exception as e:
            logger.exception("Database health check failed")
            return ResponseHelper.success({
                "status": "unhealthy",
                "database": {"connected": False, "error": str(e)},
            }, 503)

        return ResponseHelper.success({
            "status": "healthy",
            "database": {"connected": True},
        })
