from libris.extensions import db
from libris.utils.dates import utcnow

STATUS_AVAILABLE = "Available"
STATUS_BORROWED = "Borrowed"


class Book(db.Model):
    __tablename__ = "books"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False, index=True)
    author = db.Column(db.String(200), nullable=False, index=True)
    category = db.Column(db.String(100), nullable=False, index=True)
    isbn = db.Column(db.String(32), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=False, default="")
    book_image = db.Column(db.String(300), nullable=True)

    total_copies = db.Column(db.Integer, nullable=False, default=1)
    available_copies = db.Column(db.Integer, nullable=False, default=1)

    # single-borrower view, cleared together on return
    status = db.Column(db.String(20), nullable=False, default=STATUS_AVAILABLE, index=True)
    borrower_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    borrowed_at = db.Column(db.DateTime, nullable=True)
    due_date = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
