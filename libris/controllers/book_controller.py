# libris/controllers/book_controller.py

from flask import Blueprint, request, jsonify

from libris.models.user import ROLE_ADMIN, ROLE_LIBRARIAN
from libris.services.book_service import BookService
from libris.utils.dates import isoformat
from libris.utils.decorators import role_required

book_bp = Blueprint("books", __name__)


def book_to_json(b):
    return {
        "id": b.id,
        "title": b.title,
        "author": b.author,
        "category": b.category,
        "isbn": b.isbn,
        "description": b.description or "",
        "bookImage": b.book_image,
        "totalCopies": b.total_copies,
        "availableCopies": b.available_copies,
        "status": b.status,
        "borrower": b.borrower_id,
        "borrowedAt": isoformat(b.borrowed_at),
        "dueDate": isoformat(b.due_date),
        "createdAt": isoformat(b.created_at),
        "updatedAt": isoformat(b.updated_at),
    }


def _book_payload():
    """Form fields for multipart requests (cover upload), JSON body otherwise."""
    if request.mimetype == "multipart/form-data" or request.form:
        data = request.form.to_dict()
    else:
        data = request.get_json(silent=True) or {}
    image = request.files.get("bookImage")
    if image is not None and not image.filename:
        image = None
    return data, image


@book_bp.get("/", strict_slashes=False)
def list_books():
    args = request.args
    page = BookService.search_books(
        search=args.get("search"),
        category=args.get("category"),
        author=args.get("author"),
        status=args.get("status"),
        page=args.get("page"),
        limit=args.get("limit"),
    )
    return jsonify({
        "totalBooks": page.total,
        "currentPage": page.page,
        "totalPages": page.pages,
        "books": [book_to_json(b) for b in page.items],
    })


@book_bp.get("/<book_id>")
def get_book(book_id):
    return jsonify(book_to_json(BookService.get_book(book_id)))


@book_bp.post("/", strict_slashes=False)
@role_required(ROLE_ADMIN, ROLE_LIBRARIAN)
def create_book():
    data, image = _book_payload()
    b = BookService.create_book(data, image)
    return jsonify(book_to_json(b)), 201


@book_bp.put("/<book_id>")
@role_required(ROLE_ADMIN, ROLE_LIBRARIAN)
def update_book(book_id):
    data, image = _book_payload()
    b = BookService.update_book(book_id, data, image)
    return jsonify(book_to_json(b))


@book_bp.delete("/<book_id>")
@role_required(ROLE_ADMIN)
def delete_book(book_id):
    BookService.delete_book(book_id)
    return jsonify({"message": "Book deleted successfully"})
