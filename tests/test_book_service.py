import pytest

from conftest import image_file
from libris.errors import InvalidIdentifier, NotFound, StoreError, ValidationError
from libris.extensions import db
from libris.models.book import Book, STATUS_AVAILABLE, STATUS_BORROWED
from libris.services.book_service import BookService

BASE = {"title": "X", "author": "Y", "category": "Z", "isbn": "1", "totalCopies": 2}


class TestCreate:
    def test_available_defaults_to_total(self, app):
        book = BookService.create_book(dict(BASE))

        assert book.id is not None
        assert book.total_copies == 2
        assert book.available_copies == 2
        assert book.status == STATUS_AVAILABLE
        assert book.description == ""
        assert book.book_image is None

    def test_explicit_available_copies(self, app):
        book = BookService.create_book({**BASE, "availableCopies": 1})
        assert book.available_copies == 1

    def test_zero_available_copies_is_kept(self, app):
        book = BookService.create_book({**BASE, "availableCopies": 0})
        assert book.available_copies == 0

    def test_form_strings_are_parsed(self, app):
        book = BookService.create_book({**BASE, "totalCopies": "3", "availableCopies": "2"})
        assert (book.total_copies, book.available_copies) == (3, 2)

    def test_zero_total_copies_is_allowed(self, app):
        book = BookService.create_book({**BASE, "totalCopies": 0})
        assert book.total_copies == 0
        assert book.available_copies == 0

    @pytest.mark.parametrize("field", ["title", "author", "category", "isbn", "totalCopies"])
    def test_required_fields(self, app, field):
        data = {k: v for k, v in BASE.items() if k != field}
        with pytest.raises(ValidationError):
            BookService.create_book(data)
        assert Book.query.count() == 0

    def test_blank_title_counts_as_missing(self, app):
        with pytest.raises(ValidationError):
            BookService.create_book({**BASE, "title": "   "})

    def test_available_above_total_is_rejected(self, app):
        with pytest.raises(ValidationError):
            BookService.create_book({**BASE, "availableCopies": 5})

    def test_negative_or_non_numeric_counts(self, app):
        with pytest.raises(ValidationError):
            BookService.create_book({**BASE, "totalCopies": -1})
        with pytest.raises(ValidationError):
            BookService.create_book({**BASE, "totalCopies": "many"})

    def test_count_beyond_store_range_is_rejected(self, app):
        with pytest.raises(ValidationError):
            BookService.create_book({**BASE, "totalCopies": str(2 ** 63)})
        assert Book.query.count() == 0

    def test_cover_is_stored_as_path(self, app, upload_dir):
        book = BookService.create_book(dict(BASE), image_file())

        assert book.book_image.startswith("/uploads/")
        assert book.book_image.endswith("-cover.png")
        stored = upload_dir / book.book_image.rsplit("/", 1)[-1]
        assert stored.read_bytes() == b"\x89PNG fake image bytes"

    def test_cover_removed_when_insert_fails(self, app, upload_dir):
        BookService.create_book(dict(BASE))

        with pytest.raises(StoreError):
            BookService.create_book({**BASE, "title": "Duplicate"}, image_file())

        assert list(upload_dir.iterdir()) == []
        assert Book.query.count() == 1

    def test_unsupported_cover_type(self, app, upload_dir):
        with pytest.raises(ValidationError):
            BookService.create_book(dict(BASE), image_file(name="cover.exe"))
        assert not upload_dir.exists() or list(upload_dir.iterdir()) == []
        assert Book.query.count() == 0


class TestGet:
    def test_get_existing(self, make_book):
        book = make_book()
        assert BookService.get_book(book.id).id == book.id
        assert BookService.get_book(str(book.id)).id == book.id

    @pytest.mark.parametrize("raw", [
        "abc", "0", "-3", "1.5", "", "64f1c2e9a1b2c3d4e5f60718",
        "²", "٣", "+5", "007x", "9" * 23, str(2 ** 63),
    ])
    def test_malformed_id(self, app, raw):
        with pytest.raises(InvalidIdentifier):
            BookService.get_book(raw)

    def test_unknown_id(self, app):
        with pytest.raises(NotFound):
            BookService.get_book(999)

    def test_largest_store_id_is_well_formed(self, app):
        with pytest.raises(NotFound):
            BookService.get_book(str(2 ** 63 - 1))


class TestUpdate:
    def test_partial_update_leaves_absent_fields(self, make_book):
        book = make_book(title="Old", description="Keep me")

        updated = BookService.update_book(book.id, {"author": "New Author"})

        assert updated.title == "Old"
        assert updated.author == "New Author"
        assert updated.description == "Keep me"
        assert updated.total_copies == 2

    def test_empty_string_does_not_overwrite_text_fields(self, make_book):
        book = make_book(title="Old")
        updated = BookService.update_book(book.id, {"title": "", "category": ""})
        assert updated.title == "Old"
        assert updated.category == "Fiction"

    def test_empty_description_overwrites(self, make_book):
        book = make_book(description="Long text")
        updated = BookService.update_book(book.id, {"description": ""})
        assert updated.description == ""

    def test_zero_copies_overwrite(self, make_book):
        book = make_book(totalCopies=2)
        updated = BookService.update_book(book.id, {"availableCopies": 0})
        assert updated.available_copies == 0

        updated = BookService.update_book(book.id, {"totalCopies": 0})
        assert updated.total_copies == 0

    def test_invariant_violation_leaves_book_unchanged(self, make_book):
        book = make_book(title="Old", totalCopies=2)

        with pytest.raises(ValidationError):
            BookService.update_book(book.id, {"title": "New", "availableCopies": 3})

        db.session.expire_all()
        stored = db.session.get(Book, book.id)
        assert stored.title == "Old"
        assert stored.available_copies == 2

    def test_new_cover_replaces_path(self, make_book):
        book = make_book()
        first = BookService.update_book(book.id, {}, image_file(name="a.png")).book_image
        second = BookService.update_book(book.id, {}, image_file(name="b.jpg")).book_image
        assert first != second
        assert second.endswith("-b.jpg")

    def test_unknown_book(self, app):
        with pytest.raises(NotFound):
            BookService.update_book(404, {"title": "x"})


class TestDelete:
    def test_delete(self, make_book):
        book = make_book()
        BookService.delete_book(book.id)
        assert db.session.get(Book, book.id) is None

    def test_delete_unknown(self, app):
        with pytest.raises(NotFound):
            BookService.delete_book(12)


class TestSearch:
    @pytest.fixture
    def catalog(self, make_book):
        make_book(title="Dune", author="Frank Herbert", category="Science Fiction")
        make_book(title="Emma", author="Jane Austen", category="Classic")
        make_book(title="Persuasion", author="Jane Austen", category="Classic")
        make_book(title="Neuromancer", author="William Gibson", category="Science Fiction")
        make_book(title="The Hobbit", author="J.R.R. Tolkien", category="Fantasy")

    def test_no_filters_returns_everything(self, catalog):
        page = BookService.search_books()
        assert page.total == 5
        assert page.page == 1
        assert page.pages == 1
        assert [b.title for b in page.items][:2] == ["Dune", "Emma"]

    def test_search_is_case_insensitive_across_fields(self, catalog):
        assert {b.title for b in BookService.search_books(search="jane").items} == {"Emma", "Persuasion"}
        assert {b.title for b in BookService.search_books(search="FICTION").items} == {"Dune", "Neuromancer"}
        assert {b.title for b in BookService.search_books(search="hob").items} == {"The Hobbit"}

    def test_exact_filters_and_with_search(self, catalog):
        page = BookService.search_books(search="e", category="Classic", author="Jane Austen")
        assert {b.title for b in page.items} == {"Emma", "Persuasion"}

        page = BookService.search_books(category="Science")
        assert page.total == 0

    def test_status_filter(self, catalog):
        book = Book.query.filter_by(title="Emma").one()
        book.status = STATUS_BORROWED
        db.session.commit()

        page = BookService.search_books(status=STATUS_BORROWED)
        assert [b.title for b in page.items] == ["Emma"]

    def test_pagination_totals(self, catalog):
        page = BookService.search_books(page=2, limit=2)
        assert page.total == 5
        assert page.pages == 3
        assert page.page == 2
        assert len(page.items) == 2

    def test_page_beyond_end_is_empty(self, catalog):
        page = BookService.search_books(page=9, limit=2)
        assert page.items == []
        assert page.total == 5
        assert page.pages == 3

    def test_empty_catalog(self, app):
        page = BookService.search_books()
        assert page.total == 0
        assert page.pages == 0
        assert page.items == []

    def test_limit_is_clamped(self, app, make_book):
        app.config["MAX_PAGE_LIMIT"] = 3
        for _ in range(4):
            make_book()
        page = BookService.search_books(limit=1000)
        assert len(page.items) == 3
        assert page.pages == 2

    @pytest.mark.parametrize("params", [{"page": "0"}, {"page": "x"}, {"limit": "-1"}, {"limit": "ten"}])
    def test_bad_paging_params(self, app, params):
        with pytest.raises(ValidationError):
            BookService.search_books(**params)

    def test_page_with_offset_past_store_range_is_rejected(self, catalog):
        with pytest.raises(ValidationError):
            BookService.search_books(page="99999999999999999999")

    def test_largest_reachable_page_is_empty(self, catalog):
        page = BookService.search_books(page=str(2 ** 63 // 10), limit=10)
        assert page.items == []
        assert page.total == 5

    def test_wildcards_in_search_match_literally(self, make_book):
        make_book(title="100% Cotton")
        make_book(title="1000 Ways")
        make_book(title="snake_case")
        make_book(title="snakeXcase")
        make_book(title="C:\\Temp")

        assert [b.title for b in BookService.search_books(search="100%").items] == ["100% Cotton"]
        assert [b.title for b in BookService.search_books(search="e_c").items] == ["snake_case"]
        assert [b.title for b in BookService.search_books(search="%").items] == ["100% Cotton"]
        assert [b.title for b in BookService.search_books(search=":\\t").items] == ["C:\\Temp"]
