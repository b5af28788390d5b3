from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from libris.extensions import db


class LibraryError(Exception):
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(LibraryError):
    status_code = 400
    default_message = "Invalid input"


class InvalidIdentifier(LibraryError):
    status_code = 400
    default_message = "Invalid Book ID"


class NotFound(LibraryError):
    status_code = 404
    default_message = "Book not found"


class Unavailable(LibraryError):
    status_code = 400
    default_message = "Book is currently unavailable"


class AlreadyBorrowed(LibraryError):
    status_code = 400
    default_message = "You have already borrowed this book"


class NotBorrowedByUser(LibraryError):
    status_code = 400
    default_message = "You did not borrow this book"


class StoreError(LibraryError):
    status_code = 500
    default_message = "Database error"


def _json_error(message, code):
    return jsonify({"message": message}), code


def register_error_handlers(app):
    @app.errorhandler(LibraryError)
    def handle_library_error(e: LibraryError):
        if e.status_code >= 500:
            current_app.logger.error(f"[store] {e.message}")
        return _json_error(e.message, e.status_code)

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(e: SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception(f"[store] Unhandled database error: {e}")
        return _json_error(StoreError.default_message, StoreError.status_code)

    @app.errorhandler(404)
    def handle_not_found(_e):
        return _json_error("Not found", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(_e):
        return _json_error("Method not allowed", 405)

    @app.errorhandler(413)
    def handle_too_large(_e):
        return _json_error("Uploaded file is too large", 413)
