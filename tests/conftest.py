import json
import uuid
from datetime import *

import pytest

from app import create_app
from config import TestConfig
from models import db, User, Tenant, Studio, Session, Subscription


def create_user(email=None, tenant=None):
    user = User(email=email or f"{uuid.uuid4().hex}@example.com", tenant=tenant)
    db.session.add(user)
    db.session.commit()
    return user


def create_tenant(tenant_type, name="Acme"):
    tenant = Tenant(name=name, type=tenant_type)
    db.session.add(tenant)
    db.session.commit()
    return tenant


def create_studio(tenant, name="Acme Studio"):
    studio = Studio(name=name, tenant_id=tenant.id)
    db.session.add(studio)
    db.session.commit()
    return studio


def create_session(user, expires=None):
    """Create a session row for the user and return its token"""
    if expires is None:
        expires = get_current_utc() + timedelta(days=30)

    token = uuid.uuid4().hex
    db.session.add(Session(session_token=token, user_id=user.id, expires=expires))
    db.session.commit()
    return token


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def create_subscription(user, status="ACTIVE", stripe_subscription_id="sub_123", cancel_at_period_end=False):
    subscription = Subscription(
        user_id=user.id,
        plan_id="plan_pro",
        status=status,
        stripe_customer_id="cus_123",
        stripe_subscription_id=stripe_subscription_id,
        current_period_start=get_current_utc(),
        current_period_end=get_current_utc() + timedelta(days=30),
        cancel_at_period_end=cancel_at_period_end,
    )
    db.session.add(subscription)
    db.session.commit()
    return subscription


def create_subscription_event(event_id, event_type, subscription_id, status="active", cancel_at_period_end=False,
                              current_period_end=None):
    if current_period_end is None:
        current_period_end = get_30_days_later()

    return json.dumps({
        "id": event_id,
        "type": event_type,
        "data": {
            "object": {
                "id": subscription_id,
                "customer": "cus_123",
                "status": status,
                "cancel_at_period_end": cancel_at_period_end,
                "current_period_start": int(get_current_utc().timestamp()),
                "current_period_end": current_period_end
            }
        }
    })


def create_checkout_event(event_id, user_id, plan_id="plan_pro", subscription_id="sub_123", mode="subscription"):
    return json.dumps({
        "id": event_id,
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": "cs_123",
                "mode": mode,
                "customer": "cus_123",
                "subscription": subscription_id,
                "metadata": {"user_id": user_id, "plan_id": plan_id}
            }
        }
    })


def stripe_subscription(subscription_id="sub_123", status="active", cancel_at_period_end=False):
    """Stripe subscription fields as returned by BillingGateway.retrieve_subscription"""
    return {
        "id": subscription_id,
        "customer": "cus_123",
        "status": status,
        "cancel_at_period_end": cancel_at_period_end,
        "current_period_start": int(get_current_utc().timestamp()),
        "current_period_end": get_30_days_later()
    }


def create_invoice_event(event_id, event_type, subscription_id=None):
    invoice_data = {"customer": "cus_123"}
    if subscription_id:
        invoice_data["subscription"] = subscription_id

    return json.dumps({
        "id": event_id,
        "type": event_type,
        "data": {
            "object": invoice_data
        }
    })


def get_current_utc():
    """Helper to get current UTC time consistently"""
    return datetime.now(timezone.utc)


def get_30_days_later():
    """Helper to get current UTC time plus 30 days"""
    return int((get_current_utc() + timedelta(days=30)).timestamp())


@pytest.fixture
def client():
    """
    Create the test client for the app.
    """
    app = create_app(TestConfig)

    with app.test_client() as client:
        with app.app_context():
            db.create_all()
            yield client
            db.session.remove()
            db.drop_all()
