"""
API routes for the app
"""
from flask import Blueprint, request

from health_handler import HealthHandler
from profile_init_handler import ProfileInitHandler
from stripe_webhook_handler import StripeWebhookHandler
from studio_access_handler import StudioAccessHandler
from subscription_handler import SubscriptionHandler

api_bp = Blueprint('api', __name__, url_prefix='/api')


@api_bp.route("/profile-init", methods=["POST"])
def init_profile():
    """
    Initialize a profile for the current user if they don't have one yet
    """
    return ProfileInitHandler.init_profile(request)


@api_bp.route("/studio/check-access", methods=["GET"])
def check_studio_access():
    """
    Check if the current user has an initialized studio
    """
    return StudioAccessHandler.check_access(request)


@api_bp.route("/user/subscription", methods=["GET"])
def get_subscription():
    return SubscriptionHandler.get_subscription(request)


@api_bp.route("/user/subscription/cancel", methods=["POST"])
def cancel_subscription():
    return SubscriptionHandler.cancel_subscription(request)


@api_bp.route("/user/subscription/resume", methods=["POST"])
def resume_subscription():
    return SubscriptionHandler.resume_subscription(request)


@api_bp.route("/webhooks/stripe", methods=["POST"])
def handle_stripe_webhook():
    """
    Stripe webhook endpoint
    Note: the Stripe-Signature header is only verified when STRIPE_WEBHOOK_SECRET is set.
    """
    return StripeWebhookHandler.process_webhook(request)


@api_bp.route("/health", methods=["GET"])
def health():
    return HealthHandler.check_health()
