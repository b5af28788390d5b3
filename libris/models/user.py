from libris.extensions import db
from libris.utils.dates import utcnow

ROLE_ADMIN = "admin"
ROLE_LIBRARIAN = "librarian"
ROLE_MEMBER = "member"
ROLES = (ROLE_ADMIN, ROLE_LIBRARIAN, ROLE_MEMBER)


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_MEMBER)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
