import logging
from typing import Any

import stripe

from backend.core import config

logger = logging.getLogger(__name__)


class StripeNotConfiguredError(RuntimeError):
    pass


def require_stripe() -> str:
    secret_key = config.STRIPE_SECRET_KEY
    if not secret_key or not secret_key.strip():
        raise StripeNotConfiguredError("Stripe secret key is not configured.")
    return secret_key


def create_session(
    *,
    line_items: list[dict[str, Any]],
    success_url: str,
    cancel_url: str,
    metadata: dict[str, str],
) -> str:
    """Create a hosted checkout session and return its redirect URL ('' if none)."""
    session = stripe.checkout.Session.create(
        api_key=require_stripe(),
        mode="payment",
        success_url=success_url,
        cancel_url=cancel_url,
        line_items=line_items,
        metadata=metadata,
    )
    logger.info("Created Stripe checkout session %s", getattr(session, "id", None))
    return getattr(session, "url", None) or ""
