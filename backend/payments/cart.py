"""Cart pricing: turns requested items and catalog rows into Stripe line items."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping

from backend.models.book import Book
from backend.services.book_service import absolute_image_url

MINOR_UNITS_PER_MAJOR = Decimal(100)

ADDRESS_METADATA_KEYS = (
    "fullName",
    "email",
    "phone",
    "addressLine1",
    "addressLine2",
    "city",
    "state",
    "postalCode",
    "country",
)


def normalize_quantity(quantity: int | None) -> int:
    return max(1, quantity or 0)


def to_minor_units(price: Decimal | float | int | str) -> int:
    amount = Decimal(str(price)) * MINOR_UNITS_PER_MAJOR
    return int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_line_item(book: Book, quantity: int | None, *, currency: str, base_url: str) -> dict[str, Any]:
    product_data: dict[str, Any] = {"name": book.title}
    if book.author:
        product_data["description"] = book.author
    image_url = absolute_image_url(book.image, base_url)
    if image_url:
        product_data["images"] = [image_url]

    return {
        "quantity": normalize_quantity(quantity),
        "price_data": {
            "currency": currency,
            "unit_amount": to_minor_units(book.price),
            "product_data": product_data,
        },
    }


def to_line_items(
    items: Iterable[tuple[int, int | None]],
    books_by_id: Mapping[int, Book],
    *,
    currency: str,
    base_url: str,
) -> list[dict[str, Any]]:
    return [
        to_line_item(books_by_id[book_id], quantity, currency=currency, base_url=base_url)
        for book_id, quantity in items
    ]


def make_metadata(address: Mapping[str, str | None]) -> dict[str, str]:
    """Copy the shipping address into Stripe metadata, dropping absent fields."""
    metadata = {}
    for key in ADDRESS_METADATA_KEYS:
        value = address.get(key)
        if value is not None:
            metadata[key] = str(value)
    return metadata
