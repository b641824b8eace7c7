"""
Subscription handlers for the app: cancel at period end, resume, and status.
"""
import logging
from datetime import datetime, timezone

from billing_gateway import BillingGateway
from helpers import ResponseHelper, SerializationHelper
from models import db, Subscription, SubscriptionStatus
from session_resolver import SessionResolver

logger = logging.getLogger(__name__)

CANCELABLE_STATUSES = [SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIALING.value]


class SubscriptionHandler:

    @staticmethod
    def cancel_subscription(request):
        """
        Cancel the caller's active or trialing subscription at the end of the billing period
        """
        identity = None
        try:
            identity = SessionResolver.resolve_session(request)
            if not identity:
                return ResponseHelper.error("Unauthorized", 401)

            subscription = db.session.execute(
                db.select(Subscription)
                .filter(Subscription.user_id == identity.user_id, Subscription.status.in_(CANCELABLE_STATUSES))
                .order_by(Subscription.created_at.desc())
                .limit(1)
            ).scalar_one_or_none()

            if not subscription or not subscription.stripe_subscription_id:
                return ResponseHelper.error("No active subscription found", 404)

            SubscriptionHandler._set_cancel_at_period_end(subscription, True)
            return ResponseHelper.success("Subscription will be canceled at the end of the billing period")

        except Exception:
            db.session.rollback()
            logger.exception("Error canceling subscription for user %s", getattr(identity, "user_id", None))
            return ResponseHelper.error("Failed to cancel subscription", 500)

    @staticmethod
    def resume_subscription(request):
        """
        Resume a subscription that was set to cancel at the end of the billing period
        """
        identity = None
        try:
            identity = SessionResolver.resolve_session(request)
            if not identity:
                return ResponseHelper.error("Unauthorized", 401)

            subscription = db.session.execute(
                db.select(Subscription)
                .filter_by(user_id=identity.user_id, cancel_at_period_end=True)
                .order_by(Subscription.created_at.desc())
                .limit(1)
            ).scalar_one_or_none()

            if not subscription or not subscription.stripe_subscription_id:
                return ResponseHelper.error("No canceled subscription found", 404)

            SubscriptionHandler._set_cancel_at_period_end(subscription, False)
            return ResponseHelper.success("Subscription has been resumed")

        except Exception:
            db.session.rollback()
            logger.exception("Error resuming subscription for user %s", getattr(identity, "user_id", None))
            return ResponseHelper.error("Failed to resume subscription", 500)

    @staticmethod
    def get_subscription(request):
        """
        Get the caller's current (non-canceled) subscription
        """
        identity = None
        try:
            identity = SessionResolver.resolve_session(request)
            if not identity:
                return ResponseHelper.error("Unauthorized", 401)

            subscription = db.session.execute(
                db.select(Subscription)
                .filter(Subscription.user_id == identity.user_id,
                        Subscription.status != SubscriptionStatus.CANCELED.value)
                .order_by(Subscription.created_at.desc())
                .limit(1)
            ).scalar_one_or_none()

            return ResponseHelper.success({
                "has_subscription": subscription is not None,
                "subscription": SerializationHelper.subscription(subscription) if subscription else None,
            })

        except Exception:
            db.session.rollback()
            logger.exception("Error fetching subscription for user %s", getattr(identity, "user_id", None))
            return ResponseHelper.error("Internal server error", 500)

    @staticmethod
    def _set_cancel_at_period_end(subscription, cancel_at_period_end):
        """
        Update Stripe first, then the local row. The Stripe call is keyed on the row's billing_version, which only
        moves when the local write commits, so retrying after a failed local write replays the same Stripe request;
        the webhook brings the local row back in line with Stripe.
        """
        idempotency_key = SubscriptionHandler.idempotency_key(subscription, cancel_at_period_end)
        BillingGateway.update_subscription(subscription.stripe_subscription_id, cancel_at_period_end,
                                           idempotency_key=idempotency_key)

        subscription.cancel_at_period_end = cancel_at_period_end
        subscription.billing_version = (subscription.billing_version or 0) + 1
        subscription.updated_at = datetime.now(timezone.utc)
        try:
            db.session.commit()
        except Exception:
            logger.error("Stripe subscription %s updated but local subscription %s was not; "
                         "waiting for webhook to reconcile", subscription.stripe_subscription_id, subscription.id)
            raise

    @staticmethod
    def idempotency_key(subscription, cancel_at_period_end):
        action = "cancel" if cancel_at_period_end else "resume"
        return f"subscription-{subscription.id}-{action}-v{subscription.billing_version or 0}"
