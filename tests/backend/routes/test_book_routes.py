import io

import pytest
from fastapi import UploadFile
from sqlalchemy.exc import OperationalError

from backend.core import config
from backend.models.book import Book
from backend.routes.book_routes import has_upload, to_book_response
from backend.services import book_service
from conftest import bearer

BOOK_FORM = {
    'Title': 'Dune',
    'ISBN': '9780441013593',
    'Description': 'Desert planet politics.',
    'Author': 'Frank Herbert',
    'Category': 'Science Fiction',
    'Price': '9.99',
}


def _cover(content: bytes = b'\x89PNG fake cover', filename: str = 'cover.png'):
    return {'ImageFile': (filename, content, 'image/png')}


def _create(client, headers, form=None, files=None):
    return client.post('/api/Books', data=form or BOOK_FORM, files=files, headers=headers)


def test_has_upload_requires_named_non_empty_file() -> None:
    assert not has_upload(None)
    assert not has_upload(UploadFile(file=io.BytesIO(b''), filename='', size=0))
    assert not has_upload(UploadFile(file=io.BytesIO(b''), filename='cover.png', size=0))
    assert has_upload(UploadFile(file=io.BytesIO(b'x'), filename='cover.png', size=1))


def test_to_book_response_makes_relative_image_absolute() -> None:
    book = Book(id=1, title='Dune', isbn='1', description='', author='', category='',
                image='/uploads/books/a.png', price=9.99)

    response = to_book_response(book, 'http://shop.test')

    assert response.image == 'http://shop.test/uploads/books/a.png'
    assert response.price == 9.99


def test_list_books_is_public_and_empty_initially(client) -> None:
    response = client.get('/api/Books')

    assert response.status_code == 200
    assert response.json() == []


def test_get_unknown_book_returns_404(client) -> None:
    assert client.get('/api/Books/999').status_code == 404


@pytest.mark.parametrize('role_fixture', ['admin', 'customer'])
def test_create_without_image_is_rejected_regardless_of_role(client, request, role_fixture: str) -> None:
    user = request.getfixturevalue(role_fixture)

    response = _create(client, bearer(user.email))

    assert response.status_code == 400
    assert response.json() == {'detail': 'Image file is required.'}


def test_create_with_empty_image_is_rejected(client, admin) -> None:
    response = _create(client, bearer(admin.email), files=_cover(content=b''))

    assert response.status_code == 400


def test_create_requires_authentication(client) -> None:
    response = _create(client, {}, files=_cover())

    assert response.status_code == 401


def test_non_admin_cannot_create_book(client, customer) -> None:
    response = _create(client, bearer(customer.email), files=_cover())

    assert response.status_code == 403


def test_admin_creates_book_and_it_is_retrievable(client, admin, uploads_dir) -> None:
    response = _create(client, bearer(admin.email), files=_cover())

    assert response.status_code == 201
    created = response.json()
    assert created['title'] == 'Dune'
    assert created['isbn'] == '9780441013593'
    assert created['price'] == 9.99
    assert created['image'].startswith('http://testserver/uploads/books/')
    assert created['image'].endswith('.png')

    stored = list((uploads_dir / 'books').iterdir())
    assert len(stored) == 1
    assert stored[0].read_bytes() == b'\x89PNG fake cover'

    fetched = client.get(f"/api/Books/{created['id']}")
    assert fetched.json() == created


def test_admin_updates_book_and_keeps_image_without_new_upload(client, admin) -> None:
    created = _create(client, bearer(admin.email), files=_cover()).json()
    changes = {**BOOK_FORM, 'Title': 'Dune Messiah', 'Price': '12.50', 'Category': 'Classics'}

    response = client.put(f"/api/Books/{created['id']}", data=changes, headers=bearer(admin.email))

    assert response.status_code == 204
    fetched = client.get(f"/api/Books/{created['id']}").json()
    assert fetched['title'] == 'Dune Messiah'
    assert fetched['price'] == 12.5
    assert fetched['category'] == 'Classics'
    assert fetched['image'] == created['image']


def test_admin_update_replaces_image_when_uploaded(client, admin) -> None:
    created = _create(client, bearer(admin.email), files=_cover()).json()

    response = client.put(
        f"/api/Books/{created['id']}",
        data=BOOK_FORM,
        files=_cover(content=b'new cover', filename='new.jpg'),
        headers=bearer(admin.email),
    )

    assert response.status_code == 204
    fetched = client.get(f"/api/Books/{created['id']}").json()
    assert fetched['image'] != created['image']
    assert fetched['image'].endswith('.jpg')


def test_non_admin_cannot_update_book(client, admin, customer) -> None:
    created = _create(client, bearer(admin.email), files=_cover()).json()

    response = client.put(f"/api/Books/{created['id']}", data=BOOK_FORM, headers=bearer(customer.email))

    assert response.status_code == 403


def test_update_unknown_book_returns_404(client, admin) -> None:
    response = client.put('/api/Books/999', data=BOOK_FORM, headers=bearer(admin.email))

    assert response.status_code == 404


def test_non_admin_cannot_delete_book(client, admin, customer) -> None:
    _create(client, bearer(admin.email), files=_cover())

    response = client.request(
        'DELETE', '/api/Books', json={'isbn': BOOK_FORM['ISBN']}, headers=bearer(customer.email)
    )

    assert response.status_code == 403
    assert len(client.get('/api/Books').json()) == 1


def test_admin_deletes_book_by_isbn_body(client, admin) -> None:
    _create(client, bearer(admin.email), files=_cover())

    response = client.request(
        'DELETE', '/api/Books', json={'ISBN': BOOK_FORM['ISBN']}, headers=bearer(admin.email)
    )
    repeat = client.request(
        'DELETE', '/api/Books', json={'ISBN': BOOK_FORM['ISBN']}, headers=bearer(admin.email)
    )

    assert response.status_code == 204
    assert client.get('/api/Books').json() == []
    assert repeat.status_code == 404


def test_admin_deletes_book_by_isbn_path(client, admin) -> None:
    _create(client, bearer(admin.email), files=_cover())

    response = client.delete(f"/api/Books/{BOOK_FORM['ISBN']}", headers=bearer(admin.email))

    assert response.status_code == 204
    assert client.get('/api/Books').json() == []


def test_delete_without_isbn_returns_400(client, admin) -> None:
    response = client.request('DELETE', '/api/Books', json={}, headers=bearer(admin.email))

    assert response.status_code == 400


def test_email_mode_gates_on_form_email(client, admin, customer, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'AUTH_MODE', 'email')

    rejected = _create(client, {}, form={**BOOK_FORM, 'Email': customer.email}, files=_cover())
    anonymous = _create(client, {}, files=_cover())
    accepted = _create(client, {}, form={**BOOK_FORM, 'Email': admin.email}, files=_cover())

    assert rejected.status_code == 403
    assert anonymous.status_code == 401
    assert accepted.status_code == 201


def _failing_write(*_args, **_kwargs):
    raise OperationalError('INSERT INTO books', {}, Exception('database is down'))


def test_failed_create_removes_stored_cover(client, admin, uploads_dir, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(book_service, 'create_book', _failing_write)

    with pytest.raises(OperationalError):
        _create(client, bearer(admin.email), files=_cover())

    assert list((uploads_dir / 'books').iterdir()) == []


def test_failed_update_removes_new_cover_and_keeps_old(client, admin, uploads_dir, monkeypatch: pytest.MonkeyPatch) -> None:
    created = _create(client, bearer(admin.email), files=_cover()).json()
    monkeypatch.setattr(book_service, 'update_book', _failing_write)

    with pytest.raises(OperationalError):
        client.put(
            f"/api/Books/{created['id']}",
            data=BOOK_FORM,
            files=_cover(content=b'new cover', filename='new.jpg'),
            headers=bearer(admin.email),
        )

    stored = [path.name for path in (uploads_dir / 'books').iterdir()]
    assert stored == [created['image'].rsplit('/', 1)[1]]


def test_delete_book_image_ignores_remote_and_missing_files(uploads_dir) -> None:
    book_service.delete_book_image('https://covers.test/dune.jpg')
    book_service.delete_book_image('/uploads/books/missing.png')
    book_service.delete_book_image(None)

    assert not (uploads_dir / 'books').exists()
