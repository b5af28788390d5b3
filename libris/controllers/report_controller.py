from flask import Blueprint, jsonify

from libris.models.user import ROLE_ADMIN, ROLE_LIBRARIAN
from libris.services.report_service import ReportService
from libris.utils.dates import isoformat
from libris.utils.decorators import role_required

report_bp = Blueprint("reports", __name__)


@report_bp.get("/borrowings/recent")
@role_required(ROLE_LIBRARIAN, ROLE_ADMIN)
def recent_borrowings():
    rows = ReportService.recent_borrowings()
    return jsonify([
        {
            "id": b.id,
            "book": {"id": b.book.id, "title": b.book.title, "author": b.book.author},
            "user": {"id": b.user.id, "name": b.user.name, "email": b.user.email},
            "borrowedAt": isoformat(b.borrowed_at),
            "dueDate": isoformat(b.due_date),
            "returnedAt": isoformat(b.returned_at),
            "fine": b.fine or 0,
        } for b in rows
    ])


@report_bp.get("/stats/dashboard")
@role_required(ROLE_ADMIN, ROLE_LIBRARIAN)
def dashboard_stats():
    return jsonify(ReportService.dashboard_stats())
