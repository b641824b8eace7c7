"""
Helper functions for the app.
"""

from flask import jsonify
from datetime import datetime, timezone


class ResponseHelper:
    """
    Helper class for generating JSON responses.
    """

    @staticmethod
    def success(message, status_code=200):
        """
        Generate a success response.
        """
        if isinstance(message, dict):
            return jsonify(message), status_code

        return jsonify({"message": message}), status_code

    @staticmethod
    def error(message, status_code=400, details=None):
        """
        Generate an error response. ``details`` is only filled in by endpoints that expose the underlying error.
        """
        body = {"error": message}
        if details is not None:
            body["details"] = details
        return jsonify(body), status_code


class DateTimeNaiveHelper:
    """
    Helper class for converting datetime objects to naive datetime.
    """

    @staticmethod
    def make_timezone_aware(dt):
        """Convert naive datetime to UTC timezone-aware datetime, since SQLAlchemy gives out naive datetimes by
        default."""
        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt

    @staticmethod
    def isoformat(dt):
        if dt is None:
            return None
        return DateTimeNaiveHelper.make_timezone_aware(dt).isoformat()

    @staticmethod
    def from_timestamp(ts):
        """Stripe sends unix timestamps, None stays None."""
        if ts is None:
            return None
        return datetime.fromtimestamp(ts, tz=timezone.utc)


class SerializationHelper:
    """
    Helper class for turning models into JSON-ready dicts.
    """

    @staticmethod
    def profile(profile):
        return {
            "id": profile.id,
            "user_id": profile.user_id,
            "headshot_url": profile.headshot_url,
            "bio": profile.bio,
            "availability": profile.availability,
            "created_at": DateTimeNaiveHelper.isoformat(profile.created_at),
            "updated_at": DateTimeNaiveHelper.isoformat(profile.updated_at),
            "locations": [{"id": location.id, "name": location.name} for location in profile.locations],
            "skills": [{"id": skill.id, "name": skill.name} for skill in profile.skills],
            "images": [
                {"id": image.id, "url": image.url, "is_primary": image.is_primary} for image in profile.images
            ],
        }

    @staticmethod
    def subscription(subscription):
        return {
            "id": subscription.id,
            "plan_id": subscription.plan_id,
            "status": subscription.status,
            "cancel_at_period_end": subscription.cancel_at_period_end,
            "current_period_start": DateTimeNaiveHelper.isoformat(subscription.current_period_start),
            "current_period_end": DateTimeNaiveHelper.isoformat(subscription.current_period_end),
            "canceled_at": DateTimeNaiveHelper.isoformat(subscription.canceled_at),
        }
