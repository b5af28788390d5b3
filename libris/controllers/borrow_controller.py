from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from libris.models.user import ROLE_MEMBER
from libris.services.borrow_service import BorrowService
from libris.services.report_service import ReportService
from libris.utils.dates import isoformat
from libris.utils.decorators import current_user_id, role_required

borrow_bp = Blueprint("borrow", __name__)


@borrow_bp.post("/<book_id>/borrow")
@role_required(ROLE_MEMBER)
def borrow_book(book_id):
    book, _record = BorrowService.borrow_book(book_id, current_user_id())
    return jsonify({
        "message": "Book borrowed successfully",
        "book": {
            "title": book.title,
            "borrowedAt": isoformat(book.borrowed_at),
            "dueDate": isoformat(book.due_date),
        },
    })


@borrow_bp.post("/<book_id>/return")
@role_required(ROLE_MEMBER)
def return_book(book_id):
    _book, _record, fine = BorrowService.return_book(book_id, current_user_id())
    return jsonify({
        "message": "Book returned successfully",
        "fine": BorrowService.fine_message(fine),
        "fineAmount": fine,
    })


@borrow_bp.get("/user/history")
@jwt_required()
def user_history():
    records = ReportService.user_history(current_user_id())
    return jsonify([
        {
            "id": x.id,
            "bookId": x.book_id,
            "title": x.book.title if x.book else None,
            "author": x.book.author if x.book else None,
            "category": x.book.category if x.book else None,
            "status": x.status,
            "borrowedAt": isoformat(x.borrowed_at),
            "dueDate": isoformat(x.due_date),
            "returnedAt": isoformat(x.returned_at),
            "fine": x.fine or 0,
        } for x in records
    ])
