from datetime import datetime

from libris.extensions import db
from libris.models.borrow import Borrow


class BorrowRepo:
    @staticmethod
    def add(borrow: Borrow):
        db.session.add(borrow)
        return borrow

    @staticmethod
    def find_open(book_id: int, user_id: int):
        return Borrow.query.filter(
            Borrow.book_id == book_id,
            Borrow.user_id == user_id,
            Borrow.returned_at.is_(None),
        ).order_by(Borrow.borrowed_at.desc()).first()

    @staticmethod
    def list_by_user(user_id: int):
        return Borrow.query.filter_by(user_id=user_id).order_by(
            Borrow.borrowed_at.desc(), Borrow.id.desc()
        ).all()

    @staticmethod
    def list_recent(limit: int):
        return Borrow.query.order_by(
            Borrow.borrowed_at.desc(), Borrow.id.desc()
        ).limit(limit).all()

    @staticmethod
    def count_open() -> int:
        return Borrow.query.filter(Borrow.returned_at.is_(None)).count()

    @staticmethod
    def count_overdue(now: datetime) -> int:
        return Borrow.query.filter(
            Borrow.returned_at.is_(None),
            Borrow.due_date < now
        ).count()

    @staticmethod
    def find_overdue(now: datetime):
        return Borrow.query.filter(
            Borrow.returned_at.is_(None),
            Borrow.due_date < now
        ).order_by(Borrow.due_date.asc()).all()

    @staticmethod
    def commit():
        db.session.commit()
