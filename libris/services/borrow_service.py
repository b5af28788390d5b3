import math
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from libris.errors import (
    AlreadyBorrowed,
    NotBorrowedByUser,
    StoreError,
    Unavailable,
)
from libris.extensions import db
from libris.models.book import STATUS_BORROWED
from libris.models.borrow import Borrow
from libris.repositories.book_repo import BookRepo
from libris.repositories.borrow_repo import BorrowRepo
from libris.services.book_service import BookService
from libris.utils.dates import utcnow

SECONDS_PER_DAY = 24 * 60 * 60


class BorrowService:
    @staticmethod
    def compute_fine(due_date: datetime, returned_at: datetime, daily_fine: int = 5) -> int:
        """
        Late fee for a return at `returned_at`.

        Every started day past `due_date` costs `daily_fine`; returning at or
        before the due date costs nothing.
        """
        if not due_date or returned_at <= due_date:
            return 0
        days_late = math.ceil((returned_at - due_date).total_seconds() / SECONDS_PER_DAY)
        return days_late * daily_fine

    @staticmethod
    def borrow_book(book_id, user_id: int, now: datetime = None):
        now = now or utcnow()
        book = BookService.get_book(book_id)

        if book.borrower_id == user_id:
            raise AlreadyBorrowed()
        if book.status == STATUS_BORROWED or book.available_copies <= 0:
            raise Unavailable()

        due_date = now + timedelta(days=current_app.config["BORROW_PERIOD_DAYS"])

        try:
            # conditional update: loses cleanly to a concurrent borrower
            if not BookRepo.mark_borrowed(book.id, user_id, now, due_date):
                db.session.rollback()
                raise Unavailable()

            record = BorrowRepo.add(Borrow(
                user_id=user_id,
                book_id=book.id,
                borrowed_at=now,
                due_date=due_date,
            ))
            BorrowRepo.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.exception(f"[borrow] Borrow failed book={book.id} user={user_id}")
            raise StoreError("Could not record borrow") from e

        db.session.refresh(book)
        current_app.logger.info(
            f"[borrow] user={user_id} borrowed book={book.id} due={due_date.isoformat()}"
        )
        return book, record

    @staticmethod
    def return_book(book_id, user_id: int, now: datetime = None):
        now = now or utcnow()
        book = BookService.get_book(book_id)

        if book.borrower_id != user_id:
            raise NotBorrowedByUser()

        fine = BorrowService.compute_fine(book.due_date, now, current_app.config["DAILY_FINE"])

        try:
            record = BorrowRepo.find_open(book.id, user_id)
            if record:
                record.returned_at = now
                record.fine = fine
            else:
                current_app.logger.warning(
                    f"[borrow] No open borrow record for book={book.id} user={user_id}; "
                    f"resetting book only"
                )

            if not BookRepo.mark_returned(book.id, user_id):
                db.session.rollback()
                raise NotBorrowedByUser()
            BorrowRepo.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.exception(f"[borrow] Return failed book={book.id} user={user_id}")
            raise StoreError("Could not record return") from e

        db.session.refresh(book)
        current_app.logger.info(f"[borrow] user={user_id} returned book={book.id} fine={fine}")
        return book, record, fine

    @staticmethod
    def fine_message(fine: int) -> str:
        if fine > 0:
            currency = current_app.config["FINE_CURRENCY"]
            return f"{currency}{fine} has been applied for late return"
        return "No fine applied"
