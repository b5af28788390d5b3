from sqlalchemy import case, or_, update

from libris.extensions import db
from libris.models.book import Book, STATUS_AVAILABLE, STATUS_BORROWED


def _escape_like(term: str) -> str:
    # search terms match literally
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BookRepo:
    @staticmethod
    def get(book_id: int):
        return db.session.get(Book, book_id)

    @staticmethod
    def search(search=None, category=None, author=None, status=None):
        query = Book.query
        if search:
            pattern = f"%{_escape_like(search)}%"
            query = query.filter(or_(
                Book.title.ilike(pattern, escape="\\"),
                Book.author.ilike(pattern, escape="\\"),
                Book.category.ilike(pattern, escape="\\"),
            ))
        if category:
            query = query.filter(Book.category == category)
        if author:
            query = query.filter(Book.author == author)
        if status:
            query = query.filter(Book.status == status)
        return query.order_by(Book.id.asc())

    @staticmethod
    def create(book: Book):
        db.session.add(book)
        db.session.commit()
        return book

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(book: Book):
        db.session.delete(book)
        db.session.commit()

    @staticmethod
    def mark_borrowed(book_id: int, user_id: int, borrowed_at, due_date) -> bool:
        """Claims one copy for `user_id` if the book is still free. No commit."""
        result = db.session.execute(
            update(Book)
            .where(
                Book.id == book_id,
                Book.available_copies > 0,
                Book.status != STATUS_BORROWED,
            )
            .values(
                status=STATUS_BORROWED,
                borrower_id=user_id,
                borrowed_at=borrowed_at,
                due_date=due_date,
                available_copies=Book.available_copies - 1,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def mark_returned(book_id: int, user_id: int) -> bool:
        """Releases the copy held by `user_id`. No commit."""
        result = db.session.execute(
            update(Book)
            .where(Book.id == book_id, Book.borrower_id == user_id)
            .values(
                status=STATUS_AVAILABLE,
                borrower_id=None,
                borrowed_at=None,
                due_date=None,
                available_copies=case(
                    (Book.available_copies < Book.total_copies, Book.available_copies + 1),
                    else_=Book.total_copies,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def count_all() -> int:
        return Book.query.count()

    @staticmethod
    def count_available() -> int:
        return Book.query.filter(Book.available_copies > 0).count()
