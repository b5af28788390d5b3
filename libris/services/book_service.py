from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from libris.errors import NotFound, StoreError, ValidationError
from libris.extensions import db
from libris.models.book import Book
from libris.repositories.book_repo import BookRepo
from libris.services.upload_service import UploadService
from libris.utils.validators import (
    MAX_STORE_INT,
    clean_text,
    is_provided,
    parse_count,
    parse_id,
    parse_page_param,
)

TEXT_FIELDS = ("title", "author", "category", "isbn")


class BookService:
    @staticmethod
    def get_book(book_id):
        book = BookRepo.get(parse_id(book_id))
        if not book:
            raise NotFound("Book not found")
        return book

    @staticmethod
    def search_books(search=None, category=None, author=None, status=None, page=None, limit=None):
        cfg = current_app.config
        page = parse_page_param(page, "page", 1)
        limit = min(parse_page_param(limit, "limit", cfg["DEFAULT_PAGE_LIMIT"]), cfg["MAX_PAGE_LIMIT"])
        if (page - 1) * limit > MAX_STORE_INT:
            raise ValidationError("page is out of range")

        query = BookRepo.search(
            search=clean_text(search),
            category=clean_text(category),
            author=clean_text(author),
            status=clean_text(status),
        )
        return query.paginate(page=page, per_page=limit, error_out=False, count=True)

    @staticmethod
    def create_book(data: dict, image=None):
        values = {k: clean_text(data.get(k)) for k in TEXT_FIELDS}
        if not all(values.values()) or not is_provided(data, "totalCopies"):
            raise ValidationError("All fields except image and description are required")

        total = parse_count(data["totalCopies"], "totalCopies")
        if is_provided(data, "availableCopies"):
            available = parse_count(data["availableCopies"], "availableCopies")
        else:
            available = total
        BookService._check_counts(total, available)

        book = Book(
            **values,
            description=clean_text(data.get("description")) or "",
            total_copies=total,
            available_copies=available,
        )

        image_path = UploadService.save_cover(image) if image else None
        book.book_image = image_path
        try:
            return BookRepo.create(book)
        except SQLAlchemyError as e:
            db.session.rollback()
            # an accepted cover must not outlive a failed insert
            if image_path:
                UploadService.discard(image_path)
            current_app.logger.warning(f"[store] Book insert failed for isbn={values['isbn']}: {e}")
            if isinstance(e, IntegrityError):
                raise StoreError("A book with this ISBN already exists") from e
            raise StoreError("Could not save book") from e

    @staticmethod
    def update_book(book_id, data: dict, image=None):
        book = BookService.get_book(book_id)

        # text fields overwrite only when non-empty, counts whenever present (0 included)
        changes = {}
        for field in TEXT_FIELDS:
            value = clean_text(data.get(field))
            if value:
                changes[field] = value
        if "description" in data and data["description"] is not None:
            changes["description"] = str(data["description"])

        total = book.total_copies
        available = book.available_copies
        if is_provided(data, "totalCopies"):
            total = parse_count(data["totalCopies"], "totalCopies")
        if is_provided(data, "availableCopies"):
            available = parse_count(data["availableCopies"], "availableCopies")
        BookService._check_counts(total, available)
        changes["total_copies"] = total
        changes["available_copies"] = available

        image_path = UploadService.save_cover(image) if image else None
        if image_path:
            changes["book_image"] = image_path

        for field, value in changes.items():
            setattr(book, field, value)

        try:
            BookRepo.update()
        except SQLAlchemyError as e:
            db.session.rollback()
            if image_path:
                UploadService.discard(image_path)
            if isinstance(e, IntegrityError):
                raise StoreError("A book with this ISBN already exists") from e
            raise StoreError("Could not update book") from e
        return book

    @staticmethod
    def delete_book(book_id):
        book = BookService.get_book(book_id)
        BookRepo.delete(book)

    @staticmethod
    def _check_counts(total: int, available: int):
        if available > total:
            raise ValidationError("availableCopies cannot exceed totalCopies")
