"""
Studio access handler for the app.
"""
import logging

from helpers import ResponseHelper
from models import db, User, Studio
from session_resolver import SessionResolver

logger = logging.getLogger(__name__)


class StudioAccessHandler:

    @staticmethod
    def check_access(request):
        """
        Check that the caller belongs to a studio tenant with an initialized studio
        """
        identity = None
        try:
            identity = SessionResolver.resolve_session(request)
            if not identity:
                return ResponseHelper.error("Unauthorized", 401)

            user = db.session.get(User, identity.user_id)
            tenant = user.tenant if user else None

            if not tenant or not tenant.is_studio:
                return ResponseHelper.error("Only studio accounts can access this endpoint", 403)

            studio = db.session.execute(
                db.select(Studio).filter_by(tenant_id=tenant.id).limit(1)
            ).scalar_one_or_none()
            if not studio:
                return ResponseHelper.error("Studio not found", 404)

            return ResponseHelper.success({
                "status": "ok",
                "studio": {
                    "id": studio.id,
                    "name": studio.name,
                },
            })

        except Exception as e:
            db.session.rollback()
            logger.exception("Error checking studio access for user %s", getattr(identity, "user_id", None))
            # this endpoint reports the underlying error to the client
            return ResponseHelper.error("Failed to check studio access", 500, details=str(e))
