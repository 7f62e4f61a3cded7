import logging
from typing import Mapping, Sequence

from sqlalchemy.orm import Session

from backend.core import config
from backend.payments import cart, stripe_client
from backend.services import book_service

logger = logging.getLogger(__name__)

SUCCESS_PATH = "/checkout/success"
CANCEL_PATH = "/cart"


class CheckoutError(ValueError):
    pass


def redirect_base_url(request_origin: str) -> str:
    base = config.FRONTEND_BASE_URL
    if not base or not base.strip():
        base = request_origin
    return base.rstrip("/")


def create_checkout_session(
    db: Session,
    items: Sequence[tuple[int, int | None]],
    address: Mapping[str, str | None],
    request_origin: str,
) -> str:
    """Price the cart against the catalog and open a Stripe checkout session.

    Raises CheckoutError for an empty cart or unknown book ids, before any
    call to Stripe is made. Stripe failures propagate unchanged.
    """
    if not items:
        raise CheckoutError("Cart is empty.")

    stripe_client.require_stripe()

    books_by_id = book_service.get_books_by_ids(db, [book_id for book_id, _ in items])
    if any(book_id not in books_by_id for book_id, _ in items):
        raise CheckoutError("One or more books were not found.")

    line_items = cart.to_line_items(
        items,
        books_by_id,
        currency=config.STRIPE_CURRENCY,
        base_url=request_origin,
    )
    base_url = redirect_base_url(request_origin)

    logger.info("Creating checkout session with %d line items", len(line_items))
    return stripe_client.create_session(
        line_items=line_items,
        success_url=f"{base_url}{SUCCESS_PATH}",
        cancel_url=f"{base_url}{CANCEL_PATH}",
        metadata=cart.make_metadata(address),
    )
