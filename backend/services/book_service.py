import logging
import os
import shutil
import uuid
from decimal import Decimal
from typing import BinaryIO

from sqlalchemy.orm import Session

from backend.core import config
from backend.models.book import Book

logger = logging.getLogger(__name__)

BOOK_UPLOAD_SUBDIR = "books"
BOOK_UPLOAD_URL_PREFIX = "/uploads/books"


class BookNotFoundError(LookupError):
    pass


def list_books(db: Session) -> list[Book]:
    return db.query(Book).order_by(Book.id).all()


def get_book(db: Session, book_id: int) -> Book | None:
    return db.query(Book).filter(Book.id == book_id).first()


def get_books_by_ids(db: Session, book_ids: list[int]) -> dict[int, Book]:
    if not book_ids:
        return {}
    books = db.query(Book).filter(Book.id.in_(set(book_ids))).all()
    return {book.id: book for book in books}


def create_book(
    db: Session,
    *,
    title: str,
    isbn: str,
    description: str,
    author: str,
    category: str,
    image: str,
    price: Decimal,
) -> Book:
    book = Book(
        title=title,
        isbn=isbn,
        description=description,
        author=author,
        category=category,
        image=image,
        price=price,
    )
    db.add(book)
    db.commit()
    db.refresh(book)
    logger.info("Created book %s (isbn=%s)", book.id, book.isbn)
    return book


def update_book(
    db: Session,
    book_id: int,
    *,
    title: str,
    isbn: str,
    description: str,
    author: str,
    category: str,
    image: str,
    price: Decimal,
) -> Book:
    book = get_book(db, book_id)
    if book is None:
        raise BookNotFoundError(f"Book is not found with Id {book_id}")

    book.title = title
    book.isbn = isbn
    book.description = description
    book.author = author
    book.category = category
    book.image = image
    book.price = price
    db.commit()
    db.refresh(book)
    logger.info("Updated book %s", book.id)
    return book


def delete_book_by_isbn(db: Session, isbn: str) -> None:
    book = db.query(Book).filter(Book.isbn == isbn).first()
    if book is None:
        raise BookNotFoundError(f"Book is not found with ISBN {isbn}")

    db.delete(book)
    db.commit()
    logger.info("Deleted book with isbn=%s", isbn)


def save_book_image(source: BinaryIO, filename: str | None) -> str:
    """Store an uploaded cover under a generated name and return its URL path."""
    upload_root = os.path.join(config.UPLOADS_DIR, BOOK_UPLOAD_SUBDIR)
    os.makedirs(upload_root, exist_ok=True)

    extension = os.path.splitext(filename or "")[1]
    stored_name = f"{uuid.uuid4().hex}{extension}"
    with open(os.path.join(upload_root, stored_name), "wb") as target:
        shutil.copyfileobj(source, target)

    return f"{BOOK_UPLOAD_URL_PREFIX}/{stored_name}"


def absolute_image_url(image: str | None, base_url: str) -> str:
    if not image or not image.strip():
        return ""
    if image.lower().startswith("http"):
        return image
    return f"{base_url.rstrip('/')}{image}"


def delete_book_image(image: str | None) -> None:
    """Remove a stored cover given the URL path returned by save_book_image."""
    prefix = f"{BOOK_UPLOAD_URL_PREFIX}/"
    if not image or not image.startswith(prefix):
        return
    path = os.path.join(config.UPLOADS_DIR, BOOK_UPLOAD_SUBDIR, os.path.basename(image))
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
