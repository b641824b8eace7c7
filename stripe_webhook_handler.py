"""
Stripe webhook event handlers for the app
"""
import json
import logging
from datetime import datetime, timezone
from enum import Enum

import stripe
from flask import current_app
from sqlalchemy import and_, or_

from billing_gateway import BillingGateway
from helpers import ResponseHelper, DateTimeNaiveHelper
from models import db, Subscription, SubscriptionStatus, StripeProcessedEvent

logger = logging.getLogger(__name__)


class StripeEventType(Enum):
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    SUBSCRIPTION_CREATED = "customer.subscription.created"
    SUBSCRIPTION_UPDATED = "customer.subscription.updated"
    SUBSCRIPTION_DELETED = "customer.subscription.deleted"
    INVOICE_PAYMENT_FAILED = "invoice.payment_failed"
    INVOICE_PAID = "invoice.paid"


RELEVANT_EVENTS = [event_type.value for event_type in StripeEventType]

CURRENT_STATUSES = [SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIALING.value]


class StripeWebhookHandler:

    @staticmethod
    def process_webhook(request):
        """
        Webhook entry point: parse (and, when a secret is configured, verify) the payload, then process the event
        """
        payload = request.get_data()

        if current_app.config["STRIPE_WEBHOOK_SECRET"]:
            try:
                BillingGateway.construct_event(payload, request.headers.get("Stripe-Signature", ""))
            except ValueError:
                return ResponseHelper.error("Invalid payload")
            except stripe.SignatureVerificationError:
                logger.warning("Webhook signature verification failed")
                return ResponseHelper.error("Invalid signature")

        try:
            event_data = json.loads(payload or b"{}")
        except ValueError:
            return ResponseHelper.error("Invalid payload")

        if not isinstance(event_data, dict):
            return ResponseHelper.error("Invalid payload")

        return StripeWebhookHandler.process_webhook_event(event_data)

    @staticmethod
    def process_webhook_event(event_data):
        """
        Main webhook event processor that handles idempotent events and delegates event handling to specific handlers
        """
        event_id = event_data.get("id")

        if not event_id:
            return ResponseHelper.error("Invalid event data -- event id not found")

        event_type = event_data.get("type")
        try:
            # check if event was already processed for idempotency
            if db.session.get(StripeProcessedEvent, event_id):
                return ResponseHelper.success("Event already processed")

            if event_type not in RELEVANT_EVENTS:
                logger.info("Unhandled Stripe event type: %s", event_type)
                return ResponseHelper.success("Event type not relevant, ignoring")

            db.session.add(StripeProcessedEvent(stripe_event_id=event_id))

            obj = event_data.get("data", {}).get("object", {})
            if event_type == StripeEventType.CHECKOUT_SESSION_COMPLETED.value:
                subscription = StripeWebhookHandler._handle_checkout_completed(obj)
            else:
                subscription = StripeWebhookHandler._find_subscription(event_type, obj)
                if subscription:
                    StripeWebhookHandler._handle_event_by_type(event_type, obj, subscription)

            if subscription:
                subscription.updated_at = datetime.now(timezone.utc)
            else:
                logger.info("No local subscription for Stripe event %s (%s)", event_id, event_type)

            db.session.commit()
            return ResponseHelper.success("Event processed successfully")

        except Exception:
            db.session.rollback()
            logger.exception("Error handling Stripe webhook event %s (%s)", event_id, event_type)
            return ResponseHelper.error("Failed to process event", 500)

    @staticmethod
    def _handle_checkout_completed(checkout_session):
        """
        Create or update the local subscription for a completed subscription checkout. The checkout session carries
        the user and plan in its metadata; the subscription details are fetched from Stripe.
        """
        if checkout_session.get("mode") != "subscription":
            return None

        metadata = checkout_session.get("metadata") or {}
        user_id = metadata.get("user_id")
        plan_id = metadata.get("plan_id")
        remote_id = checkout_session.get("subscription")
        if not user_id or not plan_id or not remote_id:
            logger.warning("Checkout session %s is missing user, plan or subscription", checkout_session.get("id"))
            return None

        remote = BillingGateway.retrieve_subscription(remote_id)

        subscription = db.session.execute(
            db.select(Subscription)
            .filter(or_(
                Subscription.stripe_subscription_id == remote_id,
                and_(Subscription.user_id == user_id, Subscription.status.in_(CURRENT_STATUSES)),
            ))
            .order_by(Subscription.created_at.desc())
            .limit(1)
        ).scalar_one_or_none()
        if not subscription:
            subscription = Subscription(user_id=user_id)
            db.session.add(subscription)
            logger.info("Subscription created for user %s, plan %s", user_id, plan_id)

        subscription.plan_id = plan_id
        subscription.stripe_subscription_id = remote_id
        subscription.stripe_customer_id = checkout_session.get("customer")
        StripeWebhookHandler._handle_subscription_event(remote, subscription)
        return subscription

    @staticmethod
    def _find_subscription(event_type, obj):
        """
        Find the local subscription an event refers to. Subscription events carry the subscription itself, invoice
        events reference it.
        """
        if event_type in [StripeEventType.INVOICE_PAID.value, StripeEventType.INVOICE_PAYMENT_FAILED.value]:
            remote_id = obj.get("subscription")
        else:
            remote_id = obj.get("id")

        if not remote_id:
            return None

        return db.session.execute(
            db.select(Subscription).filter_by(stripe_subscription_id=remote_id).limit(1)
        ).scalar_one_or_none()

    @staticmethod
    def _handle_event_by_type(event_type, obj, subscription):
        """
        Route event to appropriate handler based on event type
        """
        if event_type in [StripeEventType.SUBSCRIPTION_CREATED.value, StripeEventType.SUBSCRIPTION_UPDATED.value]:
            StripeWebhookHandler._handle_subscription_event(obj, subscription)
        elif event_type == StripeEventType.SUBSCRIPTION_DELETED.value:
            StripeWebhookHandler._handle_subscription_deleted(obj, subscription)
        elif event_type == StripeEventType.INVOICE_PAYMENT_FAILED.value:
            subscription.status = SubscriptionStatus.PAST_DUE.value
        elif event_type == StripeEventType.INVOICE_PAID.value:
            subscription.status = SubscriptionStatus.ACTIVE.value

    @staticmethod
    def _handle_subscription_event(obj, subscription):
        """
        Handle subscription created/updated events: Stripe is the source of truth for the mirrored fields
        """
        subscription.status = StripeWebhookHandler.map_stripe_status(obj.get("status"))

        if "cancel_at_period_end" in obj:
            subscription.cancel_at_period_end = bool(obj["cancel_at_period_end"])
        if obj.get("current_period_start"):
            subscription.current_period_start = DateTimeNaiveHelper.from_timestamp(obj["current_period_start"])
        if obj.get("current_period_end"):
            subscription.current_period_end = DateTimeNaiveHelper.from_timestamp(obj["current_period_end"])
        if obj.get("customer"):
            subscription.stripe_customer_id = obj["customer"]

    @staticmethod
    def _handle_subscription_deleted(obj, subscription):
        subscription.status = SubscriptionStatus.CANCELED.value
        canceled_at = DateTimeNaiveHelper.from_timestamp(obj.get("canceled_at"))
        subscription.canceled_at = canceled_at or datetime.now(timezone.utc)

    @staticmethod
    def map_stripe_status(status):
        """
        Map a Stripe subscription status ("active", "past_due", ...) to ours. Unknown statuses count as active.
        """
        try:
            return SubscriptionStatus(str(status).upper()).value
        except ValueError:
            return SubscriptionStatus.ACTIVE.value
