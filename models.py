"""
Database models for the app
"""
import uuid
from datetime import datetime, timezone
from enum import Enum

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def _uuid():
    return str(uuid.uuid4())


def _utcnow():
    return datetime.now(timezone.utc)


class TenantType(Enum):
    STUDIO = "STUDIO"
    TALENT = "TALENT"
    ADMIN = "ADMIN"


class SubscriptionStatus(Enum):
    ACTIVE = "ACTIVE"
    PAST_DUE = "PAST_DUE"
    CANCELED = "CANCELED"
    INCOMPLETE = "INCOMPLETE"
    INCOMPLETE_EXPIRED = "INCOMPLETE_EXPIRED"
    TRIALING = "TRIALING"
    UNPAID = "UNPAID"


profile_locations = db.Table(
    "profile_locations",
    db.Column("profile_id", db.String(36), db.ForeignKey("profile.id", ondelete="CASCADE"), primary_key=True),
    db.Column("location_id", db.String(36), db.ForeignKey("location.id", ondelete="CASCADE"), primary_key=True),
)

profile_skills = db.Table(
    "profile_skills",
    db.Column("profile_id", db.String(36), db.ForeignKey("profile.id", ondelete="CASCADE"), primary_key=True),
    db.Column("skill_id", db.String(36), db.ForeignKey("skill.id", ondelete="CASCADE"), primary_key=True),
)


class Tenant(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(20), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    studio = db.relationship("Studio", back_populates="tenant", uselist=False)

    @property
    def is_studio(self):
        return self.type == TenantType.STUDIO.value


class User(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    email = db.Column(db.String(255), unique=True, nullable=False)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    role = db.Column(db.String(20), nullable=False, default="USER")
    tenant_id = db.Column(db.String(36), db.ForeignKey("tenant.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    tenant = db.relationship("Tenant")
    profile = db.relationship("Profile", back_populates="user", uselist=False)


class Studio(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    tenant_id = db.Column(db.String(36), db.ForeignKey("tenant.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    tenant = db.relationship("Tenant", back_populates="studio")


class Location(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(200), nullable=False)


class Skill(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(200), nullable=False)


class ProfileImage(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    url = db.Column(db.String(500), nullable=False)
    is_primary = db.Column(db.Boolean, nullable=False, default=False)
    profile_id = db.Column(db.String(36), db.ForeignKey("profile.id", ondelete="CASCADE"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)


class Profile(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    user_id = db.Column(db.String(36), db.ForeignKey("user.id", ondelete="CASCADE"), unique=True, nullable=False)
    headshot_url = db.Column(db.String(500), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    availability = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    user = db.relationship("User", back_populates="profile")
    locations = db.relationship("Location", secondary=profile_locations, lazy="selectin")
    skills = db.relationship("Skill", secondary=profile_skills, lazy="selectin")
    images = db.relationship("ProfileImage", lazy="selectin", cascade="all, delete-orphan")


class Subscription(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    user_id = db.Column(db.String(36), db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    plan_id = db.Column(db.String(100), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=SubscriptionStatus.ACTIVE.value)
    stripe_customer_id = db.Column(db.String(100), nullable=True)
    stripe_subscription_id = db.Column(db.String(100), nullable=True, index=True)
    current_period_start = db.Column(db.DateTime, nullable=True)
    current_period_end = db.Column(db.DateTime, nullable=True)
    cancel_at_period_end = db.Column(db.Boolean, nullable=False, default=False)
    canceled_at = db.Column(db.DateTime, nullable=True)
    # bumped on every committed local cancel/resume, keys the Stripe idempotency key
    billing_version = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=_utcnow)


class Session(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    session_token = db.Column(db.String(255), unique=True, nullable=False)
    user_id = db.Column(db.String(36), db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    expires = db.Column(db.DateTime, nullable=False)


class StripeProcessedEvent(db.Model):
    stripe_event_id = db.Column(db.String(100), primary_key=True)
