import os
import tempfile

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
os.environ.setdefault('UPLOADS_DIR', tempfile.mkdtemp(prefix='bookshop-uploads-'))
os.environ.setdefault('JWT_SECRET', 'test-secret-for-bookshop-tokens-0123456789')
os.environ.setdefault('AUTH_MODE', 'token')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.auth import jwt_handler, passwords  # noqa: E402
from backend.core import config  # noqa: E402
from backend.database import Base, get_db  # noqa: E402
from backend.models.book import Book  # noqa: E402
from backend.models.category import Category  # noqa: E402
from backend.models.user import User  # noqa: E402


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[User.__table__, Book.__table__, Category.__table__])
    try:
        yield testing_session_local
    finally:
        Base.metadata.drop_all(bind=engine, tables=[Category.__table__, Book.__table__, User.__table__])
        engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def uploads_dir(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(config, 'UPLOADS_DIR', str(tmp_path))
    return tmp_path


@pytest.fixture
def client(session_factory, uploads_dir):
    from backend.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def add_user(db, email: str, role: str = 'User', password: str = 'pw123', name: str = 'Reader') -> User:
    user = User(
        name=name,
        email=email,
        password=passwords.hash_password(password),
        initials=name[:2].upper(),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def bearer(email: str, **kwargs) -> dict[str, str]:
    return {'Authorization': f'Bearer {jwt_handler.create_access_token(email, **kwargs)}'}


@pytest.fixture
def admin(db_session) -> User:
    return add_user(db_session, 'admin@shop.test', role='Admin', name='Ada Admin')


@pytest.fixture
def customer(db_session) -> User:
    return add_user(db_session, 'reader@shop.test', role='User', name='Rita Reader')
