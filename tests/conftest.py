"""Shared fixtures: an isolated app per test with its own SQLite file and upload folder."""

import io
from datetime import datetime

import pytest
from werkzeug.datastructures import FileStorage
from werkzeug.security import generate_password_hash

from libris import create_app
from libris.config import TestConfig
from libris.extensions import db
from libris.models.user import ROLE_ADMIN, ROLE_LIBRARIAN, ROLE_MEMBER, User
from libris.services.auth_service import AuthService
from libris.services.book_service import BookService
from libris.services.borrow_service import BorrowService

T0 = datetime(2024, 3, 1, 12, 0, 0)


@pytest.fixture
def app(tmp_path):
    config = type("LocalTestConfig", (TestConfig,), {
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test_library.db'}",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
    })
    app = create_app(config)

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upload_dir(app, tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(role=ROLE_MEMBER, name=None, email=None):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            password_hash=generate_password_hash("secret"),
            role=role,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def member(make_user):
    return make_user(ROLE_MEMBER, name="Mina Member")


@pytest.fixture
def other_member(make_user):
    return make_user(ROLE_MEMBER, name="Otto Other")


@pytest.fixture
def librarian(make_user):
    return make_user(ROLE_LIBRARIAN, name="Lena Librarian")


@pytest.fixture
def admin(make_user):
    return make_user(ROLE_ADMIN, name="Ada Admin")


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        return {"Authorization": f"Bearer {AuthService.issue_token(user)}"}

    return _headers


@pytest.fixture
def make_book(app):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "title": f"Book {counter['n']}",
            "author": "Some Author",
            "category": "Fiction",
            "isbn": f"978000000{counter['n']:04d}",
            "totalCopies": 2,
        }
        data.update(overrides)
        return BookService.create_book(data)

    return _make


@pytest.fixture
def borrowed(make_book, member):
    """A book `member` borrowed at T0."""
    book = make_book(title="X", author="Y", category="Z", isbn="1", totalCopies=2)
    BorrowService.borrow_book(book.id, member.id, now=T0)
    return book


def image_file(name="cover.png", payload=b"\x89PNG fake image bytes"):
    return FileStorage(stream=io.BytesIO(payload), filename=name, content_type="image/png")
