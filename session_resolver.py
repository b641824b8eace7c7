"""
Session resolution for the app.

A request is authenticated by an opaque session token, sent either as a bearer token in the Authorization header or
in the session cookie set by the identity provider. Tokens are looked up in the Session table.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from flask import current_app

from helpers import DateTimeNaiveHelper
from models import db, Session


@dataclass(frozen=True)
class Identity:
    user_id: str


class SessionResolver:

    @staticmethod
    def resolve_session(request) -> Optional[Identity]:
        """
        Return the identity behind the request, or None if there is no live session
        """
        token = SessionResolver._extract_token(request)
        if not token:
            return None

        session = db.session.execute(
            db.select(Session).filter_by(session_token=token)
        ).scalar_one_or_none()
        if not session:
            return None

        if DateTimeNaiveHelper.make_timezone_aware(session.expires) <= datetime.now(timezone.utc):
            return None

        return Identity(user_id=session.user_id)

    @staticmethod
    def _extract_token(request) -> Optional[str]:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            return auth_header[len("Bearer "):].strip() or None

        return request.cookies.get(current_app.config["AUTH_SESSION_COOKIE"])
