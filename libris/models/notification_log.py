from libris.extensions import db
from libris.utils.dates import utcnow


class NotificationLog(db.Model):
    __tablename__ = "notification_logs"

    id = db.Column(db.Integer, primary_key=True)

    borrow_id = db.Column(db.Integer, nullable=False, index=True)

    type = db.Column(db.String(50), nullable=False, default="overdue")

    email = db.Column(db.String(255), nullable=True)
    message = db.Column(db.String(1000), nullable=True)

    sent_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    success = db.Column(db.Boolean, nullable=False, default=True)
    error_message = db.Column(db.String(500), nullable=True)
