from libris.extensions import db


class Borrow(db.Model):
    __tablename__ = "borrows"

    id = db.Column(db.Integer, primary_key=True)

    # no FK constraints: history outlives deleted books and users
    user_id = db.Column(db.Integer, nullable=False, index=True)
    book_id = db.Column(db.Integer, nullable=False, index=True)

    borrowed_at = db.Column(db.DateTime, nullable=False, index=True)
    due_date = db.Column(db.DateTime, nullable=False)
    returned_at = db.Column(db.DateTime, nullable=True, index=True)

    fine = db.Column(db.Integer, nullable=False, default=0)

    user = db.relationship(
        "User",
        primaryjoin="foreign(Borrow.user_id) == User.id",
        viewonly=True,
    )
    book = db.relationship(
        "Book",
        primaryjoin="foreign(Borrow.book_id) == Book.id",
        viewonly=True,
    )

    @property
    def status(self):
        return "Returned" if self.returned_at else "Borrowed"
