from decimal import Decimal

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile, status
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import AliasChoices, BaseModel, Field
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_admin, security
from backend.database import get_db
from backend.models.book import Book
from backend.services import book_service

router = APIRouter(tags=['books'])


class BookResponse(BaseModel):
    id: int
    title: str
    isbn: str
    description: str
    author: str
    category: str
    image: str
    price: float


class DeleteBookRequest(BaseModel):
    isbn: str | None = Field(default=None, validation_alias=AliasChoices('isbn', 'ISBN'))
    email: str | None = Field(default=None, validation_alias=AliasChoices('email', 'Email'))


def request_origin(request: Request) -> str:
    return f'{request.url.scheme}://{request.url.netloc}'


def to_book_response(book: Book, base_url: str) -> BookResponse:
    return BookResponse(
        id=book.id,
        title=book.title,
        isbn=book.isbn,
        description=book.description or '',
        author=book.author or '',
        category=book.category or '',
        image=book_service.absolute_image_url(book.image, base_url),
        price=float(book.price or 0),
    )


def has_upload(image_file: UploadFile | None) -> bool:
    if image_file is None or not image_file.filename:
        return False
    return image_file.size is None or image_file.size > 0


def store_upload(image_file: UploadFile) -> str:
    try:
        return book_service.save_book_image(image_file.file, image_file.filename)
    finally:
        image_file.file.close()


@router.get('', response_model=list[BookResponse])
def list_books(request: Request, db: Session = Depends(get_db)):
    base_url = request_origin(request)
    return [to_book_response(book, base_url) for book in book_service.list_books(db)]


@router.get('/{book_id}', response_model=BookResponse)
def get_book(book_id: int, request: Request, db: Session = Depends(get_db)):
    book = book_service.get_book(db, book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Book not found')
    return to_book_response(book, request_origin(request))


@router.post('', response_model=BookResponse, status_code=status.HTTP_201_CREATED)
def create_book(
    request: Request,
    title: str = Form(..., alias='Title'),
    isbn: str = Form(..., alias='ISBN'),
    price: Decimal = Form(..., alias='Price'),
    description: str = Form('', alias='Description'),
    author: str = Form('', alias='Author'),
    category: str = Form('', alias='Category'),
    email: str | None = Form(None, alias='Email'),
    image_file: UploadFile | None = File(None, alias='ImageFile'),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    if not has_upload(image_file):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Image file is required.')

    require_admin(db, credentials, email)

    image = store_upload(image_file)
    try:
        book = book_service.create_book(
            db,
            title=title,
            isbn=isbn,
            description=description,
            author=author,
            category=category,
            image=image,
            price=price,
        )
    except Exception:
        db.rollback()
        book_service.delete_book_image(image)
        raise

    return to_book_response(book, request_origin(request))


@router.put('/{book_id}', status_code=status.HTTP_204_NO_CONTENT)
def update_book(
    book_id: int,
    title: str = Form(..., alias='Title'),
    isbn: str = Form(..., alias='ISBN'),
    price: Decimal = Form(..., alias='Price'),
    description: str = Form('', alias='Description'),
    author: str = Form('', alias='Author'),
    category: str = Form('', alias='Category'),
    email: str | None = Form(None, alias='Email'),
    image_file: UploadFile | None = File(None, alias='ImageFile'),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    require_admin(db, credentials, email)

    existing = book_service.get_book(db, book_id)
    if existing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Book not found')

    new_image = store_upload(image_file) if has_upload(image_file) else None

    try:
        book_service.update_book(
            db,
            book_id,
            title=title,
            isbn=isbn,
            description=description,
            author=author,
            category=category,
            image=new_image or existing.image,
            price=price,
        )
    except Exception:
        db.rollback()
        book_service.delete_book_image(new_image)
        raise

    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _delete_book(
    isbn: str | None,
    payload: DeleteBookRequest | None,
    credentials: HTTPAuthorizationCredentials | None,
    db: Session,
) -> Response:
    payload = payload or DeleteBookRequest()
    require_admin(db, credentials, payload.email)

    isbn = isbn or payload.isbn
    if not isbn or not isbn.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='ISBN is required.')

    try:
        book_service.delete_book_by_isbn(db, isbn)
    except book_service.BookNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete('', status_code=status.HTTP_204_NO_CONTENT)
def delete_book(
    payload: DeleteBookRequest | None = None,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    return _delete_book(None, payload, credentials, db)


@router.delete('/{isbn}', status_code=status.HTTP_204_NO_CONTENT)
def delete_book_by_isbn(
    isbn: str,
    payload: DeleteBookRequest | None = None,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    return _delete_book(isbn, payload, credentials, db)
