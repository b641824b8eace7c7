"""
Stripe billing gateway for the app
"""
import logging

import stripe
from flask import current_app

logger = logging.getLogger(__name__)


class BillingGateway:

    @staticmethod
    def update_subscription(remote_id, cancel_at_period_end, idempotency_key=None):
        """
        Set the cancel_at_period_end flag of a Stripe subscription. Stripe errors propagate to the caller.
        """
        logger.info("Setting cancel_at_period_end=%s on Stripe subscription %s", cancel_at_period_end, remote_id)
        options = {"api_key": current_app.config["STRIPE_SECRET_KEY"]}
        if idempotency_key:
            options["idempotency_key"] = idempotency_key

        return stripe.Subscription.modify(remote_id, cancel_at_period_end=cancel_at_period_end, **options)

    @staticmethod
    def retrieve_subscription(remote_id):
        """
        Fetch a Stripe subscription as a plain dict of its top-level fields
        """
        remote = stripe.Subscription.retrieve(remote_id, api_key=current_app.config["STRIPE_SECRET_KEY"])
        return remote.to_dict()

    @staticmethod
    def construct_event(payload, signature):
        """
        Verify a webhook payload against its Stripe-Signature header.
        Raises ValueError for a bad payload and stripe.SignatureVerificationError for a bad signature.
        """
        return stripe.Webhook.construct_event(payload, signature, current_app.config["STRIPE_WEBHOOK_SECRET"])
