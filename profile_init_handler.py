"""
Profile initialization handler for the app.
"""
import logging

from helpers import ResponseHelper, SerializationHelper
from models import db, Profile
from session_resolver import SessionResolver

logger = logging.getLogger(__name__)


class ProfileInitHandler:

    @staticmethod
    def init_profile(request):
        """
        Return the caller's profile, creating an available, empty one on first use
        """
        identity = None
        try:
            identity = SessionResolver.resolve_session(request)
            if not identity:
                return ResponseHelper.error("Unauthorized", 401)

            profile = db.session.execute(
                db.select(Profile).filter_by(user_id=identity.user_id)
            ).scalar_one_or_none()

            if profile:
                return ResponseHelper.success({
                    "message": "Profile already exists",
                    "profile": SerializationHelper.profile(profile),
                })

            profile = Profile(user_id=identity.user_id, availability=True)
            db.session.add(profile)
            db.session.commit()

            return ResponseHelper.success({
                "message": "Profile created successfully",
                "profile": SerializationHelper.profile(profile),
            })

        except Exception:
            db.session.rollback()
            logger.exception("Error initializing profile for user %s", getattr(identity, "user_id", None))
            return ResponseHelper.error("Failed to initialize profile", 500)
