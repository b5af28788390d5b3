from flask import current_app

from libris.repositories.book_repo import BookRepo
from libris.repositories.borrow_repo import BorrowRepo
from libris.repositories.user_repo import UserRepo
from libris.utils.dates import utcnow


class ReportService:
    @staticmethod
    def user_history(user_id: int):
        return BorrowRepo.list_by_user(user_id)

    @staticmethod
    def recent_borrowings(limit: int = None):
        limit = limit or current_app.config["RECENT_BORROWINGS_LIMIT"]
        rows = BorrowRepo.list_recent(limit)

        valid = [b for b in rows if b.book and b.user]
        invalid = [b for b in rows if not b.book or not b.user]
        if invalid:
            details = [
                {"id": b.id, "missingBook": not b.book, "missingUser": not b.user}
                for b in invalid
            ]
            current_app.logger.warning(f"[report] Found invalid borrowings: {details}")
        return valid

    @staticmethod
    def dashboard_stats(now=None):
        # five independent counts, not a point-in-time snapshot
        now = now or utcnow()
        return {
            "totalBooks": BookRepo.count_all(),
            "availableBooks": BookRepo.count_available(),
            "borrowedBooks": BorrowRepo.count_open(),
            "overdueBooks": BorrowRepo.count_overdue(now),
            "totalUsers": UserRepo.count_all(),
        }
